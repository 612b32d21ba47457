import importlib.util
from datetime import date
from pathlib import Path

import pytest
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roster.database import metadata
from roster.models import Discipline, Student
from roster.services import student_repository

MIGRATION_PATH = Path(__file__).resolve().parents[1] / "migrations" / "versions" / "001_initial.py"


def load_migration():
    module_spec = importlib.util.spec_from_file_location("migration_001_initial", MIGRATION_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def run_migration(engine, step):
    with engine.begin() as connection:
        context = MigrationContext.configure(connection)
        with Operations.context(context):
            step()


@pytest.fixture
def blank_engine():
    engine = create_engine("sqlite://", poolclass=StaticPool,
                           connect_args={"check_same_thread": False})
    yield engine
    engine.dispose()


def test_upgrade_creates_the_mapped_schema(blank_engine):
    migration = load_migration()

    run_migration(blank_engine, migration.upgrade)

    inspector = inspect(blank_engine)
    assert set(inspector.get_table_names()) == set(metadata.tables)
    for name, table in metadata.tables.items():
        migrated = {column["name"] for column in inspector.get_columns(name)}
        assert migrated == {column.name for column in table.columns}, name


def test_discipline_values_match_enumeration():
    assert load_migration().DISCIPLINES == tuple(d.name for d in Discipline)


def test_migrated_schema_accepts_students(blank_engine):
    run_migration(blank_engine, load_migration().upgrade)

    with sessionmaker(bind=blank_engine)() as session:
        student = Student("Lovelace", "Ada", date(1815, 12, 10))
        student.picture = b"portrait"
        student_repository.save_student(session, student)
        student_repository.set_grade(student, Discipline.MATH, 5)
        session.commit()

        assert student_repository.find_students_by_first_name(session, "Ada") == [student]


def test_downgrade_drops_everything(blank_engine):
    migration = load_migration()
    run_migration(blank_engine, migration.upgrade)

    run_migration(blank_engine, migration.downgrade)

    assert inspect(blank_engine).get_table_names() == []
