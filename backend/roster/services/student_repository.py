"""
Student repository - persistence operations for Student records.

Grade ownership is enforced here rather than in mapping metadata:
- delete_student() deletes the student's grades in the same transaction
- detach_student() expunges the grades together with the student

Badges are never cascaded. Deleting a student clears badge.student and
leaves the badge row in place.
"""

import time
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.logging_config import get_logger, log_with_context
from roster.models.enums import Discipline
from roster.models.grade import Grade
from roster.models.student import Student

logger = get_logger("db")


def save_student(db: Session, student: Student) -> Student:
    """
    Validate and persist a student (insert or update).

    Raises StudentValidationError before anything is added to the session.
    """
    start_time = time.time()
    student.validate()

    db.add(student)
    db.commit()
    db.refresh(student)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Saved student {} {}".format(student.first_name, student.last_name),
        context={"student_id": student.key},
        extra_data={"duration_ms": round(duration_ms, 2)})
    return student


def get_student(db: Session, student_id: int) -> Optional[Student]:
    return db.get(Student, student_id)


def find_students_by_first_name(db: Session, first_name: str) -> List[Student]:
    """All students with exactly this first name, oldest record first."""
    stmt = select(Student).where(Student.first_name == first_name).order_by(Student.id)
    students = db.scalars(stmt).all()

    log_with_context(logger, "DEBUG",
        "Found {} students named {}".format(len(students), first_name),
        extra_data={"first_name": first_name})
    return list(students)


def list_students(db: Session, offset: int = 0, limit: int = 20):
    """Return (students, total_count) for one page ordered by id."""
    total_count = db.query(Student).count()
    students = db.scalars(
        select(Student).order_by(Student.id).offset(offset).limit(limit)
    ).all()
    return list(students), total_count


def delete_student(db: Session, student: Student) -> None:
    """Delete a student and the grades it owns."""
    student_key = student.key
    grade_count = len(student.grades)

    for grade in list(student.grades):
        db.delete(grade)
    db.delete(student)
    db.commit()

    log_with_context(logger, "INFO",
        "Deleted student {} with {} grades".format(student_key, grade_count),
        context={"student_id": student_key})


def detach_student(db: Session, student: Student) -> Student:
    """Remove a student and its grades from the session without deleting them."""
    # Load grades first so the detached student still has them
    grades = list(student.grades)
    for grade in grades:
        db.expunge(grade)
    db.expunge(student)
    return student


def set_grade(student: Student, discipline: Discipline, score: Optional[int]) -> Grade:
    """
    Record a score (or clear it with None) for one discipline.

    The score is written to the matching Grade entry and mirrored in
    alternative_grades. Returns the Grade that was updated.
    """
    grade = next((g for g in student.grades if g.discipline == discipline), None)
    if grade is None:
        grade = Grade(discipline)
        student.grades.append(grade)
    grade.grade = score

    if score is None:
        if discipline in student.alternative_grades:
            del student.alternative_grades[discipline]
    else:
        student.alternative_grades[discipline] = score

    log_with_context(logger, "DEBUG",
        "Grade for {} set to {}".format(discipline.name, score),
        context={"student_id": student.key, "discipline": discipline.name})
    return grade
