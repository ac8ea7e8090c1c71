"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (students,
grades, subjects). Repositories return SQLModel objects and commit
every mutation immediately; there is no unit of work spanning calls.
Missing rows are reported with `RecordNotFound` instead of `None` so the
HTTP layer can map them to 404 in one place.
"""

import logging
from typing import List

from sqlalchemy import update
from sqlmodel import Session, SQLModel, select

from . import models

logger = logging.getLogger("student_records.store")


class RecordNotFound(LookupError):
    """The requested identity does not exist in the store."""


class IdentityMismatch(ValueError):
    """The identity in the request path differs from the one in the body."""


class ConcurrencyConflict(RuntimeError):
    """A replace matched no row although the record still exists."""


class EntityRepository:
    """CRUD operations shared by all tables.

    Subclasses set `model` and `id_field` (the primary key attribute).
    """
    model = SQLModel
    id_field = "id"

    def __init__(self, session: Session):
        self.session = session

    @property
    def _id_column(self):
        return getattr(self.model, self.id_field)

    def _not_found(self, record_id: int) -> RecordNotFound:
        return RecordNotFound(f"{self.model.__name__} {record_id} not found")

    def list(self) -> List[SQLModel]:
        """Return all rows in store-default order."""
        return self.session.exec(select(self.model)).all()

    def get(self, record_id: int):
        """Get a row by primary key or raise `RecordNotFound`."""
        record = self.session.get(self.model, record_id)
        if record is None:
            raise self._not_found(record_id)
        return record

    def exists(self, record_id: int) -> bool:
        """Return True if a row with `record_id` exists."""
        stmt = select(self._id_column).where(self._id_column == record_id)
        return self.session.exec(stmt).first() is not None

    def create(self, record):
        """Persist a new row and return it with its store-assigned identity."""
        setattr(record, self.id_field, None)
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        logger.debug("created %s %s", self.model.__name__, getattr(record, self.id_field))
        return record

    def replace(self, record_id: int, record):
        """Overwrite every column of row `record_id` with `record`.

        The identity carried by `record` must equal `record_id`. A single
        UPDATE is issued; if it matches no row the record is looked up
        again to tell a concurrent delete (`RecordNotFound`) apart from
        any other conflict (`ConcurrencyConflict`). Nothing is retried.
        """
        if getattr(record, self.id_field) != record_id:
            raise IdentityMismatch(
                f"path id {record_id} does not match body id {getattr(record, self.id_field)}"
            )
        values = record.model_dump(exclude={self.id_field})
        table = self.model.__table__
        stmt = update(table).where(table.c[self.id_field] == record_id).values(**values)
        result = self.session.connection().execute(stmt)
        if result.rowcount != 1:
            self.session.rollback()
            if not self.exists(record_id):
                raise self._not_found(record_id)
            logger.warning("replace of %s %s matched %s rows", self.model.__name__, record_id, result.rowcount)
            raise ConcurrencyConflict(f"{self.model.__name__} {record_id} could not be updated")
        self.session.commit()
        return record

    def delete(self, record_id: int) -> None:
        """Delete row `record_id` or raise `RecordNotFound`."""
        record = self.get(record_id)
        self.session.delete(record)
        self.session.commit()
        logger.debug("deleted %s %s", self.model.__name__, record_id)


class StudentRepository(EntityRepository):
    """CRUD operations for `Student` rows."""
    model = models.Student
    id_field = "student_id"

    def delete(self, record_id: int) -> None:
        """Delete a student together with all of its grades.

        Grades are removed and flushed first so the foreign key never
        points at a missing student, then both deletes commit together.
        """
        student = self.get(record_id)
        grades = GradeRepository(self.session).list_for_student(record_id)
        for grade in grades:
            self.session.delete(grade)
        self.session.flush()
        self.session.delete(student)
        self.session.commit()
        logger.debug("deleted Student %s and %d grades", record_id, len(grades))


class GradeRepository(EntityRepository):
    """CRUD operations for `Grade` rows."""
    model = models.Grade
    id_field = "grade_id"

    def list_for_student(self, student_id: int) -> List[models.Grade]:
        """List all grade rows for the provided `student_id`."""
        stmt = select(models.Grade).where(models.Grade.student_id == student_id)
        return self.session.exec(stmt).all()


class SubjectRepository(EntityRepository):
    """CRUD operations for `Subject` rows."""
    model = models.Subject
    id_field = "subject_id"
