"""
Student API routes - CRUD operations, grading and XML export.

Provides endpoints for:
- Creating students (validated before insert)
- Listing students, optionally by first name
- Viewing student details with key and average grade
- Recording a grade for one discipline
- Exporting a student as an XML document
- Deleting a student together with its grades
"""

import time
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from roster.database import get_db
from roster.models.address import Address
from roster.models.enums import Discipline, Gender
from roster.models.phone_number import PhoneNumber, PhoneNumberFormatError
from roster.models.student import (
    FIRST_NAME_MAX_LENGTH, LAST_NAME_MAX_LENGTH, Student, StudentValidationError,
)
from roster.services import student_repository
from roster.services.xml_binding import student_to_xml
from roster.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")

MAX_SCORE = 100


# ── Pydantic schemas ─────────────────────────────────────────

class AddressPayload(BaseModel):
    street: Optional[str] = None
    number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class StudentCreate(BaseModel):
    """Schema for creating a student."""
    last_name: Optional[str] = Field(None, max_length=LAST_NAME_MAX_LENGTH)
    first_name: Optional[str] = Field(None, max_length=FIRST_NAME_MAX_LENGTH)
    birth_date: Optional[date] = None
    phone_number: Optional[str] = Field(None, description="e.g. +41 22 3796111")
    gender: Optional[Gender] = Field(None, description="Accepted but never stored")
    address: Optional[AddressPayload] = None


class GradeUpdate(BaseModel):
    """Schema for recording a score; null clears it."""
    score: Optional[int] = Field(None, ge=0, le=MAX_SCORE)


def serialize_student(student: Student) -> dict:
    """Serialize a Student to a dict for API response."""
    address = student.address
    return {
        "id": student.id,
        "key": student.key,
        "last_name": student.last_name,
        "first_name": student.first_name,
        "birth_date": student.birth_date.isoformat() if student.birth_date else None,
        "phone_number": str(student.phone_number) if student.phone_number else None,
        "address": {
            "street": address.street,
            "number": address.number,
            "postal_code": address.postal_code,
            "city": address.city,
            "country": address.country,
        } if address else None,
        "grades": [
            {"discipline": g.discipline.name, "grade": g.grade}
            for g in student.grades
        ],
        "avg_grade": student.avg_grade,
        "badge": student.badge.number if student.badge else None,
    }


def _load_student(db: Session, student_id: int) -> Student:
    student = student_repository.get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


@router.post("/api/students", status_code=201)
def create_student(request: StudentCreate, db: Session = Depends(get_db)):
    """Create a student; missing mandatory fields are rejected with 400."""
    student = Student()
    student.last_name = request.last_name
    student.first_name = request.first_name
    student.birth_date = request.birth_date
    student.gender = request.gender
    if request.address:
        student.address = Address(**request.address.model_dump())

    try:
        if request.phone_number:
            student.phone_number = PhoneNumber.parse(request.phone_number)
        student_repository.save_student(db, student)
    except (StudentValidationError, PhoneNumberFormatError) as e:
        log_with_context(logger, "WARNING", "Rejected student: {}".format(e),
                         extra_data={"field": getattr(e, "field", "phone_number")})
        raise HTTPException(status_code=400, detail=str(e))

    return serialize_student(student)


@router.get("/api/students")
def list_students(
    first_name: Optional[str] = Query(None, description="Only students with this first name"),
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Results per page"),
    db: Session = Depends(get_db)
):
    """List students, either by first name or page by page."""
    start_time = time.time()

    if first_name:
        students = student_repository.find_students_by_first_name(db, first_name)
        total_count = len(students)
        students = students[(page - 1) * per_page:page * per_page]
    else:
        students, total_count = student_repository.list_students(
            db, offset=(page - 1) * per_page, limit=per_page)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} students (page {}, total {})".format(len(students), page, total_count),
        extra_data={"duration_ms": round(duration_ms, 2)})

    return {
        "data": [serialize_student(s) for s in students],
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total_count,
            "total_pages": (total_count + per_page - 1) // per_page
        }
    }


@router.get("/api/students/{student_id}")
def get_student(student_id: int, db: Session = Depends(get_db)):
    return serialize_student(_load_student(db, student_id))


@router.put("/api/students/{student_id}/grades/{discipline}")
def record_grade(student_id: int, discipline: str, request: GradeUpdate,
                 db: Session = Depends(get_db)):
    """Set or clear the score of one discipline."""
    try:
        discipline_value = Discipline[discipline.upper()]
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown discipline: {}".format(discipline))

    student = _load_student(db, student_id)
    student_repository.set_grade(student, discipline_value, request.score)
    db.commit()
    db.refresh(student)

    log_with_context(logger, "INFO",
        "Grade recorded for student {}: {}={}".format(student_id, discipline_value.name, request.score),
        context={"student_id": str(student_id)})

    return serialize_student(student)


@router.get("/api/students/{student_id}/xml")
def export_student_xml(student_id: int, db: Session = Depends(get_db)):
    student = _load_student(db, student_id)
    return Response(content=student_to_xml(student), media_type="application/xml")


@router.delete("/api/students/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student = _load_student(db, student_id)
    student_repository.delete_student(db, student)
    return {"message": "Student deleted", "student_id": student_id}


@router.get("/api/disciplines")
def list_disciplines():
    return {"disciplines": [d.name for d in Discipline]}
