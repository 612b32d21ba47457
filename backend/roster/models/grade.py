"""
Grade model - the score a student obtained in one discipline.

Every student holds one Grade per Discipline. A Grade without a score
(grade is None) means the discipline has not been graded yet.
"""

from typing import Optional

from roster.models.enums import Discipline


class Grade:

    def __init__(self, discipline: Discipline, grade: Optional[int] = None):
        self.discipline = discipline
        self.grade = grade
        self.student = None

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    def __repr__(self):
        return f"<Grade(discipline={self.discipline.name}, grade={self.grade})>"
