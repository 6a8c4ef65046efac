# /tests/test_attendance_service.py

import datetime
from zoneinfo import ZoneInfo

import pytest

from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError
from educenter.models.attendance_model import AttendanceBatch, AttendanceItem, TeacherAttendanceCreate
from educenter.services import attendance_service

MONDAY = "2024-01-01"
TUESDAY = "2024-01-02"
TASHKENT = ZoneInfo("Asia/Tashkent")


@pytest.fixture
def classroom(factory):
    teacher = factory.teacher()
    alice = factory.student(first_name="Alice")
    bob = factory.student(first_name="Bob")
    group = factory.group(teacher=teacher, students=[alice, bob], days=("Monday", "Wednesday"))
    return teacher, group, alice, bob


def _batch(group, date, *marks):
    return AttendanceBatch(
        group_id=group.id,
        date=date,
        attendances=[AttendanceItem(student_id=s.id, status=status, grade=grade) for s, status, grade in marks],
    )


def test_teacher_records_a_batch(db, classroom, as_principal):
    teacher, group, alice, bob = classroom

    result = attendance_service.create_attendance(
        db, _batch(group, MONDAY, (alice, "present", 90), (bob, "late", None)), as_principal(teacher),
    )

    assert result.date == datetime.date(2024, 1, 1)
    assert result.teacher.id == teacher.id
    assert {s.id: s.status for s in result.students} == {alice.id: "present", bob.id: "late"}
    assert len(db.get_attendances(group.id)) == 2


def test_weekday_outside_the_schedule_writes_nothing(db, classroom, as_principal):
    teacher, group, alice, _ = classroom

    with pytest.raises(BadRequestError):
        attendance_service.create_attendance(db, _batch(group, TUESDAY, (alice, "present", None)), as_principal(teacher))

    assert db.get_attendances(group.id) == []


def test_batch_is_all_or_nothing(db, classroom, factory, as_principal):
    teacher, group, alice, _ = classroom
    outsider = factory.student()

    with pytest.raises(BadRequestError):
        attendance_service.create_attendance(
            db, _batch(group, MONDAY, (alice, "present", None), (outsider, "present", None)), as_principal(teacher),
        )
    with pytest.raises(BadRequestError):
        attendance_service.create_attendance(
            db, _batch(group, MONDAY, (alice, "present", 101)), as_principal(teacher),
        )
    with pytest.raises(BadRequestError):
        attendance_service.create_attendance(
            db, _batch(group, MONDAY, (alice, "sleeping", None)), as_principal(teacher),
        )
    with pytest.raises(BadRequestError):
        attendance_service.create_attendance(
            db, _batch(group, "01-01-2024", (alice, "present", None)), as_principal(teacher),
        )

    assert db.get_attendances(group.id) == []


def test_only_the_group_teacher_may_mark(db, classroom, factory, as_principal):
    _, group, alice, _ = classroom
    stranger = factory.teacher()

    with pytest.raises(ForbiddenError):
        attendance_service.create_attendance(db, _batch(group, MONDAY, (alice, "present", None)), as_principal(stranger))


def test_create_rejects_duplicates_but_upsert_overwrites(db, classroom, as_principal):
    teacher, group, alice, bob = classroom
    actor = as_principal(teacher)
    attendance_service.create_attendance(db, _batch(group, MONDAY, (alice, "absent", None)), actor)

    with pytest.raises(ConflictError):
        attendance_service.create_attendance(db, _batch(group, MONDAY, (alice, "present", None), (bob, "present", None)), actor)
    assert len(db.get_attendances(group.id)) == 1

    attendance_service.create_or_update_attendance(
        db, _batch(group, MONDAY, (alice, "present", 80), (bob, "present", None)), actor,
    )
    rows = {row.user_id: row for row in db.get_attendances(group.id)}
    assert rows[alice.id].status == "present"
    assert rows[alice.id].grade == 80
    assert len(rows) == 2

    attendance_service.bulk_update_attendance(
        db, group.id, MONDAY, [AttendanceItem(student_id=bob.id, status="absent")], actor,
    )
    assert {row.user_id: row.status for row in db.get_attendances(group.id)}[bob.id] == "absent"


def test_groups_without_attendance(db, classroom, as_principal):
    teacher, group, alice, _ = classroom
    after_class = datetime.datetime(2024, 1, 1, 17, 0, tzinfo=TASHKENT)
    during_class = datetime.datetime(2024, 1, 1, 15, 0, tzinfo=TASHKENT)

    assert attendance_service.groups_without_attendance(db, MONDAY, now=during_class) == []
    missing = attendance_service.groups_without_attendance(db, MONDAY, now=after_class)
    assert [m.group_id for m in missing] == [group.id]
    assert missing[0].lesson_time == "14:00 - 16:00"
    assert attendance_service.groups_without_attendance(db, TUESDAY, now=after_class + datetime.timedelta(days=1)) == []

    attendance_service.create_attendance(db, _batch(group, MONDAY, (alice, "present", None)), as_principal(teacher))
    assert attendance_service.groups_without_attendance(db, MONDAY, now=after_class) == []


def test_statistics_sorted_by_presence(db, classroom, as_principal):
    teacher, group, alice, bob = classroom
    actor = as_principal(teacher)
    attendance_service.create_attendance(db, _batch(group, MONDAY, (alice, "absent", None), (bob, "present", 70)), actor)
    attendance_service.create_attendance(db, _batch(group, "2024-01-03", (alice, "late", None), (bob, "present", 90)), actor)

    stats = attendance_service.attendance_statistics(db, group.id)

    assert [s.user.id for s in stats] == [bob.id, alice.id]
    assert (stats[0].present, stats[0].total, stats[0].average_grade) == (2, 2, 80.0)
    assert (stats[1].absent, stats[1].late, stats[1].average_grade) == (1, 1, None)


def test_daily_view_and_history(db, classroom, factory, as_principal):
    teacher, group, alice, bob = classroom
    attendance_service.create_attendance(
        db, _batch(group, MONDAY, (alice, "present", None), (bob, "absent", None)), as_principal(teacher),
    )

    daily = attendance_service.daily_attendance(db, group.id, MONDAY, student_name="ali")
    assert (daily.total_students, daily.present, daily.absent) == (2, 1, 0)

    history = attendance_service.attendance_history(db, group.id, MONDAY, as_principal(alice))
    assert (history.statistics.present, history.statistics.absent) == (1, 1)

    with pytest.raises(ForbiddenError):
        attendance_service.attendance_history(db, group.id, MONDAY, as_principal(factory.student()))


def test_teacher_attendance_is_upserted(db, classroom, factory, as_principal):
    teacher, group, _, _ = classroom
    admin = as_principal(factory.admin())
    payload = TeacherAttendanceCreate(teacher_id=teacher.id, group_id=group.id, date=MONDAY, status="absent_with_reason")

    attendance_service.mark_teacher_attendance(db, payload, admin)
    payload.status = "absent_without_reason"
    row = attendance_service.mark_teacher_attendance(db, payload, admin)

    rows = attendance_service.list_teacher_attendances(db, group_id=group.id)
    assert len(rows) == 1
    assert row.status == "absent_without_reason"

    other = factory.teacher()
    with pytest.raises(BadRequestError):
        attendance_service.mark_teacher_attendance(
            db, TeacherAttendanceCreate(teacher_id=other.id, group_id=group.id, date=MONDAY, status="absent_with_reason"),
            admin,
        )
