"""
Table declarations for the student registry.

- students: main record, with the address flattened into address_* columns
- pictures: secondary table sharing the student primary key, holds the blob
- grades: one row per (student, discipline), owned by the student
- alternative_grades: discipline -> score collection table
- badges: badge rows, each optionally pointing at one student
"""

from sqlalchemy import (
    Column, Date, Enum, ForeignKey, Integer, LargeBinary, String, Table,
    UniqueConstraint,
)

from roster.database import metadata
from roster.models.enums import Discipline
from roster.models.student import FIRST_NAME_MAX_LENGTH, LAST_NAME_MAX_LENGTH
from roster.orm.types import PhoneNumberType

discipline_enum = Enum(Discipline, name="discipline_enum")

students = Table(
    "students",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("last_name", String(LAST_NAME_MAX_LENGTH), nullable=True),
    Column("first_name", String(FIRST_NAME_MAX_LENGTH), nullable=False, index=True),
    Column("birth_date", Date, nullable=False),
    Column("phone_number", PhoneNumberType, nullable=True),
    Column("address_street", String(100), nullable=True),
    Column("address_number", String(10), nullable=True),
    Column("address_postal_code", String(10), nullable=True),
    Column("address_city", String(60), nullable=True),
    Column("address_country", String(60), nullable=True),
)

pictures = Table(
    "pictures",
    metadata,
    Column("student_id", Integer, ForeignKey("students.id"), primary_key=True),
    Column("picture", LargeBinary, nullable=True),
)

grades = Table(
    "grades",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("student_id", Integer, ForeignKey("students.id"), nullable=False, index=True),
    Column("discipline", discipline_enum, nullable=False),
    Column("grade", Integer, nullable=True),
    UniqueConstraint("student_id", "discipline", name="uq_grades_student_discipline"),
)

alternative_grades = Table(
    "alternative_grades",
    metadata,
    Column("student_id", Integer, ForeignKey("students.id"), primary_key=True),
    Column("discipline", discipline_enum, primary_key=True),
    Column("grade", Integer, nullable=False),
)

badges = Table(
    "badges",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("number", String(32), nullable=False, unique=True),
    Column("student_id", Integer, ForeignKey("students.id"), nullable=True, unique=True),
)
