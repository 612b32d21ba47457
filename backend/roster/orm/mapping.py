"""
Imperative mapping of the domain classes onto the registry tables.

Importing this module maps Student, Grade and Badge. Notes on Student:
- mapped against students JOIN pictures; id covers both key columns, so
  every student row has exactly one pictures row
- picture is deferred and only selected when first accessed
- address is a composite over the address_* columns
- grades carries no delete cascade; the repository deletes and detaches
  them together with their student
- alternative_grades is a dict proxy over AlternativeGradeEntry rows
- gender has no column and is reset to None on rows loaded from the database
"""

from sqlalchemy import event
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import attribute_keyed_dict, composite, deferred, relationship

from roster.database import mapper_registry
from roster.models.address import Address
from roster.models.badge import Badge
from roster.models.grade import Grade
from roster.models.student import Student
from roster.orm import tables


class AlternativeGradeEntry:
    """One (discipline, grade) row of the alternative_grades table."""

    def __init__(self, discipline, grade):
        self.discipline = discipline
        self.grade = grade

    def __repr__(self):
        return f"<AlternativeGradeEntry(discipline={self.discipline.name}, grade={self.grade})>"


student_with_picture = tables.students.join(
    tables.pictures, tables.students.c.id == tables.pictures.c.student_id
)

mapper_registry.map_imperatively(
    Grade,
    tables.grades,
    properties={
        "student": relationship(Student, back_populates="grades"),
    },
)

mapper_registry.map_imperatively(
    Badge,
    tables.badges,
    properties={
        "student": relationship(Student, back_populates="badge"),
    },
)

mapper_registry.map_imperatively(AlternativeGradeEntry, tables.alternative_grades)

mapper_registry.map_imperatively(
    Student,
    student_with_picture,
    properties={
        "id": [tables.students.c.id, tables.pictures.c.student_id],
        "picture": deferred(tables.pictures.c.picture),
        "address": composite(
            Address,
            tables.students.c.address_street,
            tables.students.c.address_number,
            tables.students.c.address_postal_code,
            tables.students.c.address_city,
            tables.students.c.address_country,
        ),
        "grades": relationship(
            Grade,
            back_populates="student",
            order_by=tables.grades.c.discipline.desc(),
            lazy="select",
        ),
        "badge": relationship(Badge, back_populates="student", uselist=False),
        "alternative_grade_entries": relationship(
            AlternativeGradeEntry,
            collection_class=attribute_keyed_dict("discipline"),
            cascade="all, delete-orphan",
        ),
    },
)

Student.alternative_grades = association_proxy(
    "alternative_grade_entries", "grade", creator=AlternativeGradeEntry
)


@event.listens_for(Student, "load")
def reset_unmapped_fields(student, context):
    student.gender = None


# Surface mapping errors at import time instead of on first query
mapper_registry.configure()
