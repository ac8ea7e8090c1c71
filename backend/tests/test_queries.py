from datetime import date

import pytest

from student_records import models
from student_records.queries import StudentQuery, StudentSortKey
from student_records.repositories import GradeRepository, StudentRepository


def _add(session, name, dob=date(2000, 1, 1)):
    return StudentRepository(session).create(
        models.Student(name=name, email=f"{name.lower()}@x.com", date_of_birth=dob)
    )


def _names(students):
    return [s.name for s in students]


def test_sort_key_parse():
    assert StudentSortKey.parse("name") is StudentSortKey.NAME
    assert StudentSortKey.parse("age") is StudentSortKey.AGE
    assert StudentSortKey.parse("Name") is None
    assert StudentSortKey.parse("") is None
    assert StudentSortKey.parse(None) is None


def test_name_filter_is_substring_match(session):
    for name in ("Anna", "Susanna", "Anne-Marie", "Bob", "Joan"):
        _add(session, name)
    assert sorted(_names(StudentQuery(session).filter(name="Ann"))) == ["Anna", "Anne-Marie", "Susanna"]


def test_name_filter_is_case_insensitive_on_sqlite(session):
    _add(session, "Anna")
    _add(session, "Bob")
    assert _names(StudentQuery(session).filter(name="anna")) == ["Anna"]


def test_name_filter_escapes_wildcards(session):
    _add(session, "Anna")
    _add(session, "100% Sam")
    assert _names(StudentQuery(session).filter(name="%")) == ["100% Sam"]


def test_empty_name_filter_returns_everyone(session):
    _add(session, "Anna")
    _add(session, "Bob")
    assert len(StudentQuery(session).filter(name="")) == 2


def test_min_age_compares_calendar_years_only(session):
    today = date(2026, 1, 15)
    _add(session, "NotYetTwenty", dob=date(2006, 12, 31))
    _add(session, "Nineteen", dob=date(2007, 1, 1))
    _add(session, "Older", dob=date(1999, 6, 1))
    result = StudentQuery(session).filter(min_age=20, today=today)
    assert sorted(_names(result)) == ["NotYetTwenty", "Older"]


def test_sort_by_name_and_age(session):
    _add(session, "Cleo", dob=date(2001, 1, 1))
    _add(session, "Abe", dob=date(2003, 1, 1))
    _add(session, "Bea", dob=date(1999, 1, 1))
    query = StudentQuery(session)
    assert _names(query.filter(sort_by="name")) == ["Abe", "Bea", "Cleo"]
    assert _names(query.filter(sort_by="age")) == ["Bea", "Cleo", "Abe"]


def test_unknown_sort_key_keeps_default_order(session):
    for name in ("Cleo", "Abe", "Bea"):
        _add(session, name)
    assert _names(StudentQuery(session).filter(sort_by="email")) == ["Cleo", "Abe", "Bea"]


def test_filters_then_sort(session):
    _add(session, "Zanna", dob=date(1990, 1, 1))
    _add(session, "Anna", dob=date(2020, 1, 1))
    _add(session, "Hanna", dob=date(1995, 1, 1))
    result = StudentQuery(session).filter(name="anna", min_age=18, sort_by="name", today=date(2026, 6, 1))
    assert _names(result) == ["Hanna", "Zanna"]


@pytest.fixture()
def twelve_students(session):
    return [_add(session, f"S{i:02d}") for i in range(12)]


def test_paginate_second_page(session, twelve_students):
    page = StudentQuery(session).paginate(page_number=2, page_size=5)
    assert _names(page) == ["S05", "S06", "S07", "S08", "S09"]


def test_paginate_defaults_and_last_page(session, twelve_students):
    query = StudentQuery(session)
    assert len(query.paginate()) == 10
    assert _names(query.paginate(page_number=3, page_size=5)) == ["S10", "S11"]
    assert query.paginate(page_number=9, page_size=5) == []


def test_paginate_page_zero_is_not_clamped(session, twelve_students):
    # OFFSET -5 reaches SQLite unchanged, which treats it as zero
    page = StudentQuery(session).paginate(page_number=0, page_size=5)
    assert _names(page) == ["S00", "S01", "S02", "S03", "S04"]


def test_with_grades_projection(session):
    ada = _add(session, "Ada")
    _add(session, "Bob")
    grades = GradeRepository(session)
    grades.create(models.Grade(student_id=ada.student_id, subject="Math", grade_value=95))
    grades.create(models.Grade(student_id=ada.student_id, subject="Art", grade_value=80))
    result = StudentQuery(session).with_grades()
    assert [r.name for r in result] == ["Ada", "Bob"]
    assert [(g.subject, g.grade_value) for g in result[0].grades] == [("Math", 95), ("Art", 80)]
    assert result[1].grades == []
