"""Business logic services used by HTTP controllers.

Services coordinate repositories and compute derived results. They are
intentionally thin and raise the repository exceptions so controllers
can translate them to HTTP status codes.
"""

from sqlalchemy import func
from sqlmodel import Session, select

from . import models
from .repositories import RecordNotFound
from .schemas import PerformanceReport

NO_GRADES_MESSAGE = "No grades found for this student."


class PerformanceService:
    """Aggregate statistics over a student's grades."""
    def __init__(self, session: Session):
        self.session = session

    def student_performance(self, student_id: int) -> PerformanceReport:
        """Return average, maximum and minimum grade for `student_id`.

        The average is the plain mean of all grade values. Raises
        `RecordNotFound` when the student has no grades; whether the
        student itself exists is not checked.
        """
        value = models.Grade.grade_value
        stmt = select(func.count(), func.avg(value), func.max(value), func.min(value)).where(
            models.Grade.student_id == student_id
        )
        count, average, highest, lowest = self.session.exec(stmt).one()
        if not count:
            raise RecordNotFound(NO_GRADES_MESSAGE)
        return PerformanceReport(average_grade=average, max_grade=highest, min_grade=lowest)
