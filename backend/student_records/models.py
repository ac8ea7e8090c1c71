"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Grades point at their student through a plain foreign key; no ORM
relationship attribute is declared, related rows are read with explicit
joins in `queries.py`.
"""

from datetime import date
from typing import Optional

from sqlmodel import SQLModel, Field


class Student(SQLModel, table=True):
    """A student record.

    `student_id` is assigned by the store on insert.
    """
    student_id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str
    date_of_birth: date


class Grade(SQLModel, table=True):
    """A single grade obtained by a student.

    `subject` is free text and is not linked to the `Subject` table.
    """
    grade_id: Optional[int] = Field(default=None, primary_key=True)
    student_id: int = Field(foreign_key="student.student_id", index=True, nullable=False)
    subject: str
    grade_value: float


class Subject(SQLModel, table=True):
    """A subject offered by the school."""
    subject_id: Optional[int] = Field(default=None, primary_key=True)
    name: str
