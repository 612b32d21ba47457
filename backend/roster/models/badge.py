"""
Badge model - an access badge handed out to a student.

The badge side owns the association: the badges table carries the
student_id column and removing a student only clears that reference.
"""


class Badge:

    def __init__(self, number: str, student=None):
        self.number = number
        self.student = student

    def __repr__(self):
        student_id = getattr(self.student, "id", None)
        return f"<Badge(number='{self.number}', student={student_id})>"
