"""Read-only student queries: filtering, sorting, paging and projections.

Queries are composed as SQL statements and executed once; nothing here
walks an object graph, so listing students with their grades is a single
outer join rather than one query per student.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from sqlalchemy import extract
from sqlmodel import Session, select

from . import models
from .schemas import GradeSummary, StudentWithGrades


class StudentSortKey(str, Enum):
    """Recognised values of the `sortBy` query parameter."""
    NAME = "name"
    AGE = "age"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["StudentSortKey"]:
        """Return the matching key, or None for empty/unknown values."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_SORT_COLUMNS = {
    StudentSortKey.NAME: models.Student.name,
    # ascending birth date, i.e. oldest student first
    StudentSortKey.AGE: models.Student.date_of_birth,
}


class StudentQuery:
    """Compose filter/sort/pagination statements over `Student` rows."""
    def __init__(self, session: Session):
        self.session = session

    def filter(self, name: Optional[str] = None, min_age: Optional[int] = None,
               sort_by: Optional[str] = None, today: Optional[date] = None) -> List[models.Student]:
        """Return students matching the optional filters, then sorted.

        `name` is a substring match using the store's LIKE collation
        (case-insensitive for ASCII on SQLite). `min_age` compares only
        calendar years: `today.year - birth_year >= min_age`, so a
        student born on 31 December counts as a year older for the whole
        year. An unrecognised `sort_by` leaves store-default order.
        """
        stmt = select(models.Student)
        if name:
            stmt = stmt.where(models.Student.name.contains(name, autoescape=True))
        if min_age is not None:
            current_year = (today or date.today()).year
            stmt = stmt.where(extract("year", models.Student.date_of_birth) <= current_year - min_age)
        sort_key = StudentSortKey.parse(sort_by)
        if sort_key is not None:
            stmt = stmt.order_by(_SORT_COLUMNS[sort_key])
        return self.session.exec(stmt).all()

    def paginate(self, page_number: int = 1, page_size: int = 10) -> List[models.Student]:
        """Return one page of students in store-default order.

        Values are not clamped: page numbers below 1 produce a negative
        offset, which SQLite treats as zero, and a negative page size
        means no limit on SQLite.
        """
        stmt = select(models.Student).offset((page_number - 1) * page_size).limit(page_size)
        return self.session.exec(stmt).all()

    def with_grades(self) -> List[StudentWithGrades]:
        """Return every student with the subject and value of each grade."""
        stmt = (
            select(
                models.Student.student_id,
                models.Student.name,
                models.Student.email,
                models.Grade.subject,
                models.Grade.grade_value,
            )
            .join(models.Grade, models.Grade.student_id == models.Student.student_id, isouter=True)
            .order_by(models.Student.student_id, models.Grade.grade_id)
        )
        out = {}
        for student_id, name, email, subject, grade_value in self.session.exec(stmt).all():
            entry = out.get(student_id)
            if entry is None:
                entry = out[student_id] = StudentWithGrades(student_id=student_id, name=name, email=email, grades=[])
            # students without grades come back with a NULL grade half
            if subject is not None:
                entry.grades.append(GradeSummary(subject=subject, grade_value=grade_value))
        return list(out.values())
