# /tests/test_lesson_service.py

import datetime
from zoneinfo import ZoneInfo

import pytest

from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError
from educenter.models.attendance_model import AttendanceBatch, AttendanceItem
from educenter.models.lesson_model import LessonCreate, LessonUpdate
from educenter.services import attendance_service, lesson_service

TASHKENT = ZoneInfo("Asia/Tashkent")
MONDAY_AFTERNOON = datetime.datetime(2024, 1, 1, 14, 5, tzinfo=TASHKENT)


@pytest.fixture
def classroom(factory):
    teacher = factory.teacher()
    students = [factory.student(), factory.student()]
    group = factory.group(teacher=teacher, students=students, days=("Monday", "Wednesday"),
                          start_time="14:00", end_time="15:30")
    return teacher, group, students


def test_teacher_opens_one_lesson_per_day(db, classroom, as_principal):
    teacher, group, _ = classroom
    actor = as_principal(teacher)

    lesson = lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Intro"), actor, now=MONDAY_AFTERNOON)

    assert lesson.lesson_number == 1
    assert lesson.end_date - lesson.lesson_date == datetime.timedelta(minutes=90)
    with pytest.raises(ConflictError):
        lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Again"), actor, now=MONDAY_AFTERNOON)

    wednesday = MONDAY_AFTERNOON + datetime.timedelta(days=2)
    second = lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Loops"), actor, now=wednesday)
    assert second.lesson_number == 2


def test_lesson_rules(db, classroom, factory, as_principal):
    teacher, group, _ = classroom
    tuesday = MONDAY_AFTERNOON + datetime.timedelta(days=1)

    with pytest.raises(BadRequestError):
        lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="X"), as_principal(teacher), now=tuesday)
    with pytest.raises(ForbiddenError):
        lesson_service.create_lesson(
            db, LessonCreate(group_id=group.id, lesson_name="X"), as_principal(factory.teacher()), now=MONDAY_AFTERNOON,
        )
    assert db.get_lessons(group.id) == []


def test_unscheduled_group_gets_two_hour_lessons(db, factory, as_principal):
    teacher = factory.teacher()
    group = factory.group(teacher=teacher, days=("Monday",), start_time=None, end_time=None)

    lesson = lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="X"), as_principal(teacher), now=MONDAY_AFTERNOON)

    assert lesson.end_date - lesson.lesson_date == datetime.timedelta(hours=2)


def test_rename_and_delete_are_owner_only(db, classroom, factory, as_principal):
    teacher, group, _ = classroom
    lesson = lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Intro"), as_principal(teacher), now=MONDAY_AFTERNOON)

    with pytest.raises(ForbiddenError):
        lesson_service.update_lesson(db, lesson.id, LessonUpdate(lesson_name="Hijack"), as_principal(factory.teacher()))
    renamed = lesson_service.update_lesson(db, lesson.id, LessonUpdate(lesson_name="Basics"), as_principal(teacher))
    assert renamed.lesson_name == "Basics"

    lesson_service.delete_lesson(db, lesson.id, as_principal(teacher))
    assert db.get_lessons(group.id) == []


def test_statistics_read_the_days_attendance(db, classroom, as_principal):
    teacher, group, students = classroom
    actor = as_principal(teacher)
    lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Intro"), actor, now=MONDAY_AFTERNOON)
    attendance_service.create_attendance(db, AttendanceBatch(
        group_id=group.id,
        date="2024-01-01",
        attendances=[
            AttendanceItem(student_id=students[0].id, status="present"),
            AttendanceItem(student_id=students[1].id, status="absent"),
        ],
    ), actor)

    [stats] = lesson_service.lesson_statistics(db, group.id)
    history = lesson_service.lesson_attendance_history(db, stats.lesson.id)

    assert (stats.total_students, stats.present_count, stats.attendance_rate) == (2, 1, 50.0)
    assert len(history.attendances) == 2


def test_group_lessons_visible_to_members_only(db, classroom, factory, as_principal):
    teacher, group, students = classroom
    lesson_service.create_lesson(db, LessonCreate(group_id=group.id, lesson_name="Intro"), as_principal(teacher), now=MONDAY_AFTERNOON)

    assert len(lesson_service.list_group_lessons(db, group.id, as_principal(students[0]))) == 1
    assert len(lesson_service.list_group_lessons(db, group.id, as_principal(teacher), "2024-01-01")) == 1
    with pytest.raises(ForbiddenError):
        lesson_service.list_group_lessons(db, group.id, as_principal(factory.student()))
