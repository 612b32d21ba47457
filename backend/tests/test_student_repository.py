from datetime import date

import pytest
from sqlalchemy import func, inspect, select

from roster.models import (
    Address, Badge, Discipline, Gender, PhoneNumber, Student, StudentValidationError,
)
from roster.orm import tables
from roster.services import student_repository


def count_rows(db, table):
    return db.scalar(select(func.count()).select_from(table))


def test_save_assigns_id_and_key(db, ada):
    student_repository.save_student(db, ada)

    assert ada.id is not None
    assert ada.key == str(ada.id)


def test_save_rejects_invalid_student_before_insert(db):
    student = Student()
    student.first_name = "Ada"

    with pytest.raises(StudentValidationError):
        student_repository.save_student(db, student)

    assert count_rows(db, tables.students) == 0


def test_round_trip_of_mapped_fields(db, session_factory, ada):
    ada.phone_number = PhoneNumber("44", "20", "79460000")
    ada.address = Address(street="St James's Square", number="12", city="London", country="UK")
    ada.picture = b"\x89PNG portrait"
    student_repository.save_student(db, ada)

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)

        assert loaded == ada
        assert loaded.birth_date == date(1815, 12, 10)
        assert loaded.phone_number == PhoneNumber("44", "20", "79460000")
        assert loaded.address == Address(street="St James's Square", number="12",
                                         city="London", country="UK")
        assert loaded.picture == b"\x89PNG portrait"


def test_phone_number_is_stored_in_storage_form(db, ada):
    ada.phone_number = PhoneNumber("44", "20", "79460000")
    student_repository.save_student(db, ada)

    raw = db.connection().exec_driver_sql("SELECT phone_number FROM students").scalar()
    assert raw == "+44-20-79460000"


def test_picture_lives_in_secondary_table_and_is_deferred(db, session_factory, ada):
    ada.picture = b"portrait"
    student_repository.save_student(db, ada)

    stored = db.execute(
        select(tables.pictures.c.picture).where(tables.pictures.c.student_id == ada.id)
    ).scalar_one()
    assert stored == b"portrait"

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)
        assert "picture" in inspect(loaded).unloaded
        assert loaded.picture == b"portrait"


def test_student_without_picture_still_gets_a_pictures_row(db, ada):
    student_repository.save_student(db, ada)

    assert count_rows(db, tables.pictures) == 1
    assert ada.picture is None


def test_gender_is_never_persisted(db, session_factory, ada):
    ada.gender = Gender.FEMALE
    student_repository.save_student(db, ada)

    assert "gender" not in tables.students.c

    with session_factory() as other:
        assert student_repository.get_student(other, ada.id).gender is None


def test_grades_are_persisted_and_loaded_in_descending_discipline_order(db, session_factory, ada):
    student_repository.save_student(db, ada)

    assert count_rows(db, tables.grades) == len(Discipline)

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)
        names = [g.discipline.name for g in loaded.grades]
        assert names == sorted((d.name for d in Discipline), reverse=True)
        assert all(g.grade is None for g in loaded.grades)


def test_grades_load_only_on_first_access(db, session_factory, ada):
    student_repository.save_student(db, ada)
    student_repository.set_grade(ada, Discipline.MATH, 4)
    db.commit()

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)
        assert "grades" in inspect(loaded).unloaded

        grades = loaded.grades
        assert "grades" not in inspect(loaded).unloaded
        assert [g.discipline for g in grades] == sorted(Discipline, key=lambda d: d.name, reverse=True)
        assert {g.discipline: g.grade for g in grades}[Discipline.MATH] == 4


def test_set_grade_updates_grades_and_alternative_grades(db, session_factory, ada):
    student_repository.save_student(db, ada)

    student_repository.set_grade(ada, Discipline.MATH, 5)
    student_repository.set_grade(ada, Discipline.PHYSICS, 3)
    db.commit()

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)
        assert loaded.avg_grade == pytest.approx(2.0)
        assert dict(loaded.alternative_grades) == {Discipline.MATH: 5, Discipline.PHYSICS: 3}

    assert count_rows(db, tables.alternative_grades) == 2


def test_clearing_a_grade_removes_the_alternative_entry(db, ada):
    student_repository.save_student(db, ada)
    student_repository.set_grade(ada, Discipline.MATH, 5)
    student_repository.set_grade(ada, Discipline.BIOLOGY, 4)
    db.commit()

    grade = student_repository.set_grade(ada, Discipline.MATH, None)
    db.commit()

    assert grade.grade is None
    assert dict(ada.alternative_grades) == {Discipline.BIOLOGY: 4}
    assert count_rows(db, tables.alternative_grades) == 1


def test_set_grade_adds_missing_grade_entry():
    student = Student()
    student.grades = []

    grade = student_repository.set_grade(student, Discipline.CHEMISTRY, 4)

    assert student.grades == [grade]
    assert grade.discipline is Discipline.CHEMISTRY


def test_find_students_by_first_name(db):
    first = Student("Lovelace", "Ada", date(1815, 12, 10))
    second = Student("Yonath", "Ada", date(1939, 6, 22))
    other = Student("Turing", "Alan", date(1912, 6, 23))
    for student in (first, second, other):
        student_repository.save_student(db, student)

    found = student_repository.find_students_by_first_name(db, "Ada")

    assert [s.last_name for s in found] == ["Lovelace", "Yonath"]
    assert student_repository.find_students_by_first_name(db, "Grace") == []


def test_list_students_paginates(db):
    for day in range(1, 6):
        student_repository.save_student(db, Student("Doe", "Jane", date(2000, 1, day)))

    page, total = student_repository.list_students(db, offset=2, limit=2)

    assert total == 5
    assert [s.birth_date.day for s in page] == [3, 4]


def test_get_missing_student_returns_none(db):
    assert student_repository.get_student(db, 12345) is None


def test_delete_cascades_to_grades_but_keeps_badge(db, ada):
    Badge("B-1815", ada)
    ada.picture = b"portrait"
    student_repository.save_student(db, ada)
    student_repository.set_grade(ada, Discipline.MATH, 5)
    db.commit()

    student_repository.delete_student(db, ada)

    assert count_rows(db, tables.students) == 0
    assert count_rows(db, tables.pictures) == 0
    assert count_rows(db, tables.grades) == 0
    assert count_rows(db, tables.alternative_grades) == 0

    badge = db.scalars(select(Badge)).one()
    assert badge.number == "B-1815"
    assert badge.student is None


def test_badge_back_reference(db, session_factory, ada):
    badge = Badge("B-42", ada)
    student_repository.save_student(db, ada)

    assert ada.badge is badge

    with session_factory() as other:
        loaded = student_repository.get_student(other, ada.id)
        assert loaded.badge.number == "B-42"
        assert loaded.badge.student is loaded


def test_detach_removes_student_and_grades_from_session(db, ada):
    student_repository.save_student(db, ada)

    detached = student_repository.detach_student(db, ada)

    assert detached not in db
    assert len(detached.grades) == len(Discipline)
    assert all(grade not in db for grade in detached.grades)
