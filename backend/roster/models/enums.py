"""Closed enumerations used by the student record."""

import enum


class Discipline(enum.Enum):
    """Academic subjects a student is graded in."""
    MATH = "Math"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BIOLOGY = "Biology"


class Gender(enum.Enum):
    MALE = "male"
    FEMALE = "female"
