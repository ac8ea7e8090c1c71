"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the student records backend.
Controllers are intentionally thin: they accept requests, delegate to
repositories, queries and services, and translate their exceptions to
status codes.

Endpoints implemented (under /api):
- GET/POST /students, GET/PUT/DELETE /students/{id}
- GET /students/filter
- GET /students/with-grades
- GET /students/paginated
- GET/POST /grades, GET/PUT/DELETE /grades/{id}
- GET /grades/performance/{student_id}
- GET/POST /subjects, GET/PUT/DELETE /subjects/{id}
"""

import json
import logging
import time
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .database import create_db_and_tables, get_session
from .queries import StudentQuery
from .repositories import IdentityMismatch, RecordNotFound
from .schemas import (
    GradeIn,
    GradeOut,
    GradeReplace,
    PerformanceReport,
    StudentIn,
    StudentOut,
    StudentReplace,
    StudentWithGrades,
    SubjectIn,
    SubjectOut,
    SubjectReplace,
)
from .services import PerformanceService

app = FastAPI(title="Student Records API")
api = APIRouter(prefix="/api")
logger = logging.getLogger("student_records.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


# bounds of the integer query parameters; larger values cannot reach SQLite
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


def _log_payload(request: Request, req_id: str, started: float, **extra) -> str:
    payload = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        **extra,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    return json.dumps(payload, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag every response with `X-Request-ID` and log timing for API calls."""
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_failed %s", _log_payload(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if request.url.path.startswith(api.prefix):
        logger.info("request_done %s", _log_payload(request, req_id, started, status_code=response.status_code))
    return response


def _get_or_404(repo: repositories.EntityRepository, record_id: int):
    try:
        return repo.get(record_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


def _replace(repo: repositories.EntityRepository, record_id: int, record) -> Response:
    try:
        repo.replace(record_id, record)
    except IdentityMismatch as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _delete(repo: repositories.EntityRepository, record_id: int) -> Response:
    try:
        repo.delete(record_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------
# STUDENTS
# ---------------------------------------------------------
@api.get("/students", response_model=List[StudentOut])
def list_students(db: Session = Depends(get_session)):
    """List all students in store-default order."""
    return repositories.StudentRepository(db).list()


@api.get("/students/filter", response_model=List[StudentOut])
def filter_students(
    name: Optional[str] = None,
    min_age: Optional[int] = Query(default=None, alias="minAge", ge=INT32_MIN, le=INT32_MAX),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    db: Session = Depends(get_session),
):
    """Filter students by name substring and minimum age, then sort.

    `sortBy` accepts `name` or `age` (birth date ascending); any other
    value keeps store-default order. Age compares calendar years only.
    """
    return StudentQuery(db).filter(name=name, min_age=min_age, sort_by=sort_by)


@api.get("/students/with-grades", response_model=List[StudentWithGrades])
def list_students_with_grades(db: Session = Depends(get_session)):
    """List students with the subject and value of each of their grades."""
    return StudentQuery(db).with_grades()


@api.get("/students/paginated", response_model=List[StudentOut])
def paginate_students(
    page_number: int = Query(default=1, alias="pageNumber", ge=INT32_MIN, le=INT32_MAX),
    page_size: int = Query(default=10, alias="pageSize", ge=INT32_MIN, le=INT32_MAX),
    db: Session = Depends(get_session),
):
    """Return one page of students; page values are passed through unclamped."""
    return StudentQuery(db).paginate(page_number=page_number, page_size=page_size)


@api.get("/students/{student_id}", response_model=StudentOut)
def get_student(student_id: int, db: Session = Depends(get_session)):
    return _get_or_404(repositories.StudentRepository(db), student_id)


@api.post("/students", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(payload: StudentIn, request: Request, response: Response, db: Session = Depends(get_session)):
    """Create a student; the response carries a Location header for it."""
    student = repositories.StudentRepository(db).create(models.Student(**payload.model_dump()))
    response.headers["Location"] = str(request.url_for("get_student", student_id=student.student_id))
    return student


@api.put("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_student(student_id: int, payload: StudentReplace, db: Session = Depends(get_session)):
    """Replace a student. The body `StudentId` must equal the path id."""
    return _replace(repositories.StudentRepository(db), student_id, models.Student(**payload.model_dump()))


@api.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: int, db: Session = Depends(get_session)):
    """Delete a student and all of its grades."""
    return _delete(repositories.StudentRepository(db), student_id)


# ---------------------------------------------------------
# GRADES
# ---------------------------------------------------------
@api.get("/grades", response_model=List[GradeOut])
def list_grades(db: Session = Depends(get_session)):
    return repositories.GradeRepository(db).list()


@api.get("/grades/performance/{student_id}", response_model=PerformanceReport)
def student_performance(student_id: int, db: Session = Depends(get_session)):
    """Return average, maximum and minimum grade for a student.

    Responds 404 when the student has no grades.
    """
    try:
        return PerformanceService(db).student_performance(student_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@api.get("/grades/{grade_id}", response_model=GradeOut)
def get_grade(grade_id: int, db: Session = Depends(get_session)):
    return _get_or_404(repositories.GradeRepository(db), grade_id)


@api.post("/grades", response_model=GradeOut, status_code=status.HTTP_201_CREATED)
def create_grade(payload: GradeIn, request: Request, response: Response, db: Session = Depends(get_session)):
    """Create a grade. An unknown `StudentId` violates the foreign key."""
    grade = repositories.GradeRepository(db).create(models.Grade(**payload.model_dump()))
    response.headers["Location"] = str(request.url_for("get_grade", grade_id=grade.grade_id))
    return grade


@api.put("/grades/{grade_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_grade(grade_id: int, payload: GradeReplace, db: Session = Depends(get_session)):
    return _replace(repositories.GradeRepository(db), grade_id, models.Grade(**payload.model_dump()))


@api.delete("/grades/{grade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_grade(grade_id: int, db: Session = Depends(get_session)):
    return _delete(repositories.GradeRepository(db), grade_id)


# ---------------------------------------------------------
# SUBJECTS
# ---------------------------------------------------------
@api.get("/subjects", response_model=List[SubjectOut])
def list_subjects(db: Session = Depends(get_session)):
    return repositories.SubjectRepository(db).list()


@api.get("/subjects/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: int, db: Session = Depends(get_session)):
    return _get_or_404(repositories.SubjectRepository(db), subject_id)


@api.post("/subjects", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectIn, request: Request, response: Response, db: Session = Depends(get_session)):
    subject = repositories.SubjectRepository(db).create(models.Subject(**payload.model_dump()))
    response.headers["Location"] = str(request.url_for("get_subject", subject_id=subject.subject_id))
    return subject


@api.put("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_subject(subject_id: int, payload: SubjectReplace, db: Session = Depends(get_session)):
    return _replace(repositories.SubjectRepository(db), subject_id, models.Subject(**payload.model_dump()))


@api.delete("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(subject_id: int, db: Session = Depends(get_session)):
    return _delete(repositories.SubjectRepository(db), subject_id)


app.include_router(api)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
