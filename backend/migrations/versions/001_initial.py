"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Creates all database tables for the Student Registry:
- students: Student records with the address flattened into address_* columns
- pictures: Secondary table holding the student picture, keyed by student id
- grades: One row per student and discipline
- alternative_grades: Discipline -> score collection table
- badges: Badges, each optionally assigned to one student
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DISCIPLINES = ('MATH', 'PHYSICS', 'CHEMISTRY', 'BIOLOGY')


def upgrade() -> None:
    discipline_enum = sa.Enum(*DISCIPLINES, name='discipline_enum')
    # grades creates the PostgreSQL type, later tables only reference it
    if op.get_bind().dialect.name == 'postgresql':
        discipline_ref = postgresql.ENUM(*DISCIPLINES, name='discipline_enum', create_type=False)
    else:
        discipline_ref = sa.Enum(*DISCIPLINES, name='discipline_enum')

    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('last_name', sa.String(35), nullable=True),
        sa.Column('first_name', sa.String(35), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('phone_number', sa.String(32), nullable=True),
        sa.Column('address_street', sa.String(100), nullable=True),
        sa.Column('address_number', sa.String(10), nullable=True),
        sa.Column('address_postal_code', sa.String(10), nullable=True),
        sa.Column('address_city', sa.String(60), nullable=True),
        sa.Column('address_country', sa.String(60), nullable=True),
    )
    op.create_index('ix_students_first_name', 'students', ['first_name'])

    # ── Pictures Table (secondary table of students) ──────────
    op.create_table(
        'pictures',
        sa.Column('student_id', sa.Integer(),
                  sa.ForeignKey('students.id'), primary_key=True),
        sa.Column('picture', sa.LargeBinary(), nullable=True),
    )

    # ── Grades Table ──────────────────────────────────────────
    op.create_table(
        'grades',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.Integer(),
                  sa.ForeignKey('students.id'), nullable=False),
        sa.Column('discipline', discipline_enum, nullable=False),
        sa.Column('grade', sa.Integer(), nullable=True),
        sa.UniqueConstraint('student_id', 'discipline', name='uq_grades_student_discipline'),
    )
    op.create_index('ix_grades_student_id', 'grades', ['student_id'])

    # ── Alternative Grades Collection Table ───────────────────
    op.create_table(
        'alternative_grades',
        sa.Column('student_id', sa.Integer(),
                  sa.ForeignKey('students.id'), primary_key=True),
        sa.Column('discipline', discipline_ref, primary_key=True),
        sa.Column('grade', sa.Integer(), nullable=False),
    )

    # ── Badges Table ──────────────────────────────────────────
    op.create_table(
        'badges',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('number', sa.String(32), nullable=False, unique=True),
        sa.Column('student_id', sa.Integer(),
                  sa.ForeignKey('students.id'), nullable=True, unique=True),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('badges')
    op.drop_table('alternative_grades')
    op.drop_index('ix_grades_student_id', table_name='grades')
    op.drop_table('grades')
    op.drop_table('pictures')
    op.drop_index('ix_students_first_name', table_name='students')
    op.drop_table('students')
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('DROP TYPE IF EXISTS discipline_enum')
