"""CLI script to fill the local database with a few demo records.
Usage: python scripts/seed_demo_data.py [--reset]
"""
import sys
import argparse
import pathlib
from datetime import date
# Ensure `backend/` is on sys.path so `student_records` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session, SQLModel
from student_records import models, repositories
from student_records.database import engine, create_db_and_tables

STUDENTS = [
    ("Ada Lovelace", "ada@example.com", date(2004, 12, 10), [("Math", 95), ("Physics", 88)]),
    ("Alan Turing", "alan@example.com", date(2005, 6, 23), [("Math", 91), ("Chemistry", 72), ("Physics", 84)]),
    ("Grace Hopper", "grace@example.com", date(2006, 12, 9), [("Math", 78)]),
    ("Edsger Dijkstra", "edsger@example.com", date(2007, 5, 11), []),
]
SUBJECTS = ["Math", "Physics", "Chemistry", "History"]


def main(reset: bool = False):
    """Create the tables and insert demo students, grades and subjects.

    With `reset`, all tables are dropped first. A summary is printed to
    stdout.
    """
    if reset:
        SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    with Session(engine) as session:
        student_repo = repositories.StudentRepository(session)
        grade_repo = repositories.GradeRepository(session)
        subject_repo = repositories.SubjectRepository(session)
        total_grades = 0
        for name, email, dob, grades in STUDENTS:
            student = student_repo.create(models.Student(name=name, email=email, date_of_birth=dob))
            for subject, value in grades:
                grade_repo.create(models.Grade(student_id=student.student_id, subject=subject, grade_value=value))
                total_grades += 1
            print(f'Created student {student.student_id}: {name} with {len(grades)} grades')
        for subject in SUBJECTS:
            subject_repo.create(models.Subject(name=subject))
        print(f'Total: {len(STUDENTS)} students, {total_grades} grades, {len(SUBJECTS)} subjects')

if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--reset', action='store_true', help='Drop all tables before seeding')
    args = parser.parse_args()
    main(reset=args.reset)
