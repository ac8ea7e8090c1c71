"""Pydantic request/response schemas used by the API.

Schemas keep the JSON contract stable: fields are exposed with
PascalCase keys (`StudentId`, `DateOfBirth`, ...) while request bodies
also accept the snake_case field names.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, from_attributes=True)


class StudentIn(ApiModel):
    """Payload for creating a student. Any identity sent is ignored."""
    name: str
    email: str
    date_of_birth: date


class StudentReplace(StudentIn):
    """Full replacement body; `StudentId` must match the path id."""
    student_id: Optional[int] = None


class StudentOut(StudentIn):
    student_id: int


class GradeIn(ApiModel):
    """Payload for creating a grade."""
    student_id: int
    subject: str
    grade_value: float


class GradeReplace(GradeIn):
    """Full replacement body; `GradeId` must match the path id."""
    grade_id: Optional[int] = None


class GradeOut(GradeIn):
    grade_id: int


class SubjectIn(ApiModel):
    name: str


class SubjectReplace(SubjectIn):
    subject_id: Optional[int] = None


class SubjectOut(SubjectIn):
    subject_id: int


class GradeSummary(ApiModel):
    """Reduced grade shape used inside `StudentWithGrades`."""
    subject: str
    grade_value: float


class StudentWithGrades(ApiModel):
    """Read-only projection of a student and the subject/value of each grade."""
    student_id: int
    name: str
    email: str
    grades: List[GradeSummary] = []


class PerformanceReport(ApiModel):
    """Aggregate statistics over one student's grades."""
    average_grade: float
    max_grade: float
    min_grade: float
