# /tests/test_group_service.py

from types import SimpleNamespace

import pytest

from educenter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from educenter.models.course_model import CourseCreate
from educenter.models.group_model import GroupCreate, GroupUpdate
from educenter.services import course_service, group_service


def _payload(course, **fields):
    data = {"name": "Backend", "course_id": course.id, "price": 100000, "days_of_week": ["Monday", "Thursday"]}
    data.update(fields)
    return GroupCreate(**data)


def test_create_group_with_roster(db, factory):
    teacher = factory.teacher(percent=10)
    course = factory.course()
    students = [factory.student(), factory.student(), factory.student()]

    group = group_service.create_group(db, _payload(
        course, teacher_id=teacher.id, user_ids=[s.id for s in students] + [students[0].id],
    ))

    assert len(group.students) == 3
    assert group.teacher_salary == 30000
    assert group.status == "active"


def test_create_group_rules(db, factory):
    course = factory.course()
    student = factory.student()

    with pytest.raises(NotFoundError):
        group_service.create_group(db, _payload(course, teacher_id=student.id))
    with pytest.raises(NotFoundError):
        group_service.create_group(db, _payload(course, user_ids=[student.id, 999]))
    group_service.create_group(db, _payload(course))
    with pytest.raises(ConflictError):
        group_service.create_group(db, _payload(course))
    # The same name is fine in another course.
    group_service.create_group(db, _payload(factory.course()))


def test_reassigning_a_group_pays_both_teachers(db, factory):
    old, new = factory.teacher(percent=10), factory.teacher(percent=20)
    group = factory.group(teacher=old, price=100000, students=[factory.student()])
    # Factory rows skip the salary refresh; a no-op status change settles it.
    group_service.update_status(db, group.id, "active")

    updated = group_service.update_group(db, group.id, GroupUpdate(teacher_id=new.id))

    assert updated.teacher_salary == 20000
    assert db.get_user_by_id(old.id).salary == 0


def test_status_and_delete(db, factory):
    teacher = factory.teacher(percent=10)
    group = factory.group(teacher=teacher, price=100000, students=[factory.student()])

    with pytest.raises(BadRequestError):
        group_service.update_status(db, group.id, "archived")
    assert group_service.update_status(db, group.id, "completed").teacher_salary == 0
    assert group_service.update_status(db, group.id, "active").teacher_salary == 10000

    result = group_service.delete_group(db, group.id)
    assert result.teacher_salary == 0
    with pytest.raises(NotFoundError):
        group_service.get_group(db, group.id)


def test_list_groups_statistics(db, factory):
    course = factory.course()
    factory.group(course=course, students=[factory.student(), factory.student()], name="Morning")
    factory.group(course=course, students=[factory.student()], name="Evening")
    factory.group(status="completed")

    listing = group_service.list_groups(db)
    searched = group_service.list_groups(db, search="morn")

    stats = listing.statistics
    assert (stats.total_groups, stats.total_students, stats.active_courses) == (2, 3, 1)
    assert stats.total_groups_this_month == 2
    assert [g.name for g in searched.groups] == ["Morning"]
    assert searched.groups[0].data == "14:00 16:00"


def test_lesson_dates_in_month():
    group = SimpleNamespace(days_of_week=["Monday", "Wednesday"], end_time="16:00")
    late = SimpleNamespace(days_of_week=["Wednesday"], end_time="00:30")

    # January 2024 starts on a Monday and ends on a Wednesday.
    assert group_service.lesson_dates_in_month(group, 2024, 1) == [1, 3, 8, 10, 15, 17, 22, 24, 29, 31]
    assert group_service.lesson_dates_in_month(late, 2024, 1) == [3, 10, 17, 24]


def test_teacher_views(db, factory):
    teacher = factory.teacher()
    student = factory.student()
    group = factory.group(teacher=teacher, students=[student], days=("Monday",))

    overview = group_service.get_teacher_groups(db, teacher.id)
    [schedule] = group_service.get_teacher_schedule(db, teacher.id, month=1, year=2024)

    assert overview.stats.total_groups == 1
    assert overview.stats.new_groups_last_week == 1
    assert overview.groups[0].days_of_week == "Dushanba"
    assert overview.groups[0].time == "14:00 - 16:00"
    assert schedule.id == group.id
    assert schedule.lesson_dates == [1, 8, 15, 22, 29]
    assert schedule.total_lessons == 5
    assert [s.id for s in schedule.students] == [student.id]
    with pytest.raises(NotFoundError):
        group_service.get_teacher_groups(db, factory.teacher().id)
    with pytest.raises(BadRequestError):
        group_service.get_teacher_schedule(db, teacher.id, month=13, year=2024)


def test_course_lifecycle(db, factory):
    teacher = factory.teacher(percent=10)
    course = course_service.create_course(db, CourseCreate(name="Frontend"))
    course_row = db.get_course_by_id(course.id)
    factory.group(course=course_row, teacher=teacher, price=100000, students=[factory.student(), factory.student()])
    group_service.update_status(db, db.get_groups(course_id=course.id)[0].id, "active")

    with pytest.raises(ConflictError):
        course_service.create_course(db, CourseCreate(name="Frontend"))
    listing = course_service.list_courses(db, name="front")
    assert (listing.data[0].total_groups, listing.data[0].total_students) == (1, 2)
    assert listing.stats.this_month_groups == 1

    course_service.delete_course(db, course.id)

    assert db.get_user_by_id(teacher.id).salary == 0
    with pytest.raises(NotFoundError):
        course_service.get_course(db, course.id)
