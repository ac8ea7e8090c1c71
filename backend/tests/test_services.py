from datetime import date

import pytest

from student_records import models
from student_records.repositories import GradeRepository, RecordNotFound, StudentRepository
from student_records.services import NO_GRADES_MESSAGE, PerformanceService


def test_performance_statistics(session):
    sid = StudentRepository(session).create(
        models.Student(name="Ada", email="a@x.com", date_of_birth=date(1990, 1, 1))
    ).student_id
    grades = GradeRepository(session)
    for value in (70, 80, 90):
        grades.create(models.Grade(student_id=sid, subject="Math", grade_value=value))
    report = PerformanceService(session).student_performance(sid)
    assert report.average_grade == pytest.approx(80)
    assert report.max_grade == 90
    assert report.min_grade == 70


def test_performance_average_is_unweighted_float(session):
    sid = StudentRepository(session).create(
        models.Student(name="Ada", email="a@x.com", date_of_birth=date(1990, 1, 1))
    ).student_id
    grades = GradeRepository(session)
    for value in (1, 2):
        grades.create(models.Grade(student_id=sid, subject="Math", grade_value=value))
    assert PerformanceService(session).student_performance(sid).average_grade == pytest.approx(1.5)


def test_performance_without_grades_raises(session):
    # the student is never looked up; an unknown id behaves like an empty one
    with pytest.raises(RecordNotFound, match=NO_GRADES_MESSAGE):
        PerformanceService(session).student_performance(12345)
