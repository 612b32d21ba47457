"""
Student model - the central record of the registry.

A Student is a plain Python object. The relational mapping lives in
roster.orm and the XML layout in roster.services.xml_binding; nothing in
this module knows about either.

Identity has two levels:
- id: surrogate key assigned by the database on first flush
- (last_name, first_name, birth_date): natural key used for equality,
  hashing and, for transient students, for the fallback key
"""

from datetime import date
from typing import Optional

from roster.models.enums import Discipline
from roster.models.grade import Grade

LAST_NAME_MAX_LENGTH = 35
FIRST_NAME_MAX_LENGTH = 35

# hash_code() value for a student without a last name
UNNAMED_HASH = -1


class StudentValidationError(ValueError):
    """Raised by Student.validate() for the first missing mandatory field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class Student:
    """
    A student with personal data, grades and optional picture/badge.

    Student() seeds one ungraded Grade per Discipline. Passing any of
    last_name, first_name or birth_date also assigns them and runs
    validate(), so a half-filled student is rejected immediately.
    """

    def __init__(self, last_name: Optional[str] = None, first_name: Optional[str] = None,
                 birth_date: Optional[date] = None):
        self.id = None
        self.last_name = last_name
        self.first_name = first_name
        self.birth_date = birth_date
        self.phone_number = None
        self.gender = None
        self.address = None
        self.picture = None
        self.badge = None
        self.grades = [Grade(discipline) for discipline in Discipline]
        self.alternative_grades = {}

        if last_name is not None or first_name is not None or birth_date is not None:
            self.validate()

    @property
    def key(self) -> str:
        """Database id as text, or the natural-key hash for unsaved students."""
        if self.id is not None:
            return str(self.id)
        return str(self.hash_code())

    @property
    def avg_grade(self) -> float:
        """
        Average over all grade entries.

        Ungraded disciplines count in the divisor, so a student graded
        5 and 3 in two of four disciplines averages 2.0.
        """
        if not self.grades:
            return 0.0
        total = 0.0
        for grade in self.grades:
            if grade.grade is not None:
                total += float(grade.grade)
        return total / len(self.grades)

    @property
    def disciplines(self) -> tuple:
        return tuple(Discipline)

    def validate(self):
        """Check mandatory fields in order: first name, last name, birth date."""
        if self.first_name is None:
            raise StudentValidationError("first_name", "Firstname is mandatory")
        if self.last_name is None:
            raise StudentValidationError("last_name", "Lastname is mandatory")
        if self.birth_date is None:
            raise StudentValidationError("birth_date", "Birthdate is mandatory")

    def hash_code(self) -> int:
        if self.last_name is None:
            return UNNAMED_HASH
        return hash(self.last_name) ^ hash(self.first_name) ^ hash(self.birth_date)

    def __hash__(self):
        # hash() itself reports a -1 result as -2
        return self.hash_code()

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Student):
            return NotImplemented
        return (self.last_name, self.first_name, self.birth_date) == \
            (other.last_name, other.first_name, other.birth_date)

    def __repr__(self):
        return (f"<Student(id={self.id}, last_name='{self.last_name}', first_name='{self.first_name}', "
                f"birth_date={self.birth_date}, phone_number={self.phone_number}, grades={self.grades})>")
