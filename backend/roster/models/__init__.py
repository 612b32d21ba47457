from roster.models.enums import Discipline, Gender
from roster.models.address import Address
from roster.models.phone_number import PhoneNumber, PhoneNumberFormatError
from roster.models.grade import Grade
from roster.models.badge import Badge
from roster.models.student import Student, StudentValidationError

__all__ = [
    "Discipline", "Gender", "Address", "PhoneNumber", "PhoneNumberFormatError",
    "Grade", "Badge", "Student", "StudentValidationError",
]
