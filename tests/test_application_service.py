# /tests/test_application_service.py

import pytest

from educenter.core.exceptions import ConflictError, NotFoundError
from educenter.models.application_model import ApplicationCreate
from educenter.services import application_service


def _apply(db, phone="+998901112233", **fields):
    return application_service.create_application(db, ApplicationCreate(
        first_name="Lola", last_name="Karimova", phone=phone, **fields,
    ))


def test_plain_lead_stays_new(db):
    application = _apply(db)

    assert application.status is False
    assert application.is_contacted is False
    assert application.user_id is None
    assert db.get_user_by_phone("+998901112233") is None


def test_lead_with_group_becomes_an_enrolled_student(db, factory):
    teacher = factory.teacher(percent=10)
    group = factory.group(teacher=teacher, price=100000)

    application = _apply(db, group_id=group.id)

    student = db.get_user_by_phone("+998901112233")
    assert application.status is True
    assert application.user_id == student.id
    assert application.course_id == group.course_id
    assert student.role_name == "student"
    assert [s.id for s in db.get_group_by_id(group.id).students] == [student.id]
    assert db.get_user_by_id(teacher.id).salary == 10000


def test_existing_student_is_reused(db, factory):
    student = factory.student(phone="+998905556677")
    group = factory.group(students=[student])

    application = _apply(db, phone="+998905556677", group_id=group.id)

    assert application.user_id == student.id
    assert len(db.get_group_by_id(group.id).students) == 1


def test_conversion_failures_write_nothing(db, factory):
    factory.teacher(phone="+998907778899")
    finished = factory.group(status="completed")

    with pytest.raises(ConflictError):
        _apply(db, phone="+998907778899", course_id=factory.course().id)
    with pytest.raises(NotFoundError):
        _apply(db, group_id=finished.id)
    assert application_service.list_applications(db).statistics.total_applications == 0


def test_listing_and_follow_up(db, factory):
    first = _apply(db, phone="+998900000001")
    _apply(db, phone="+998900000002")
    group = factory.group()

    contacted = application_service.mark_contacted(db, first.id)
    assigned = application_service.assign_group(db, first.id, group.id)
    listing = application_service.list_applications(db)

    assert (contacted.status, contacted.is_contacted) == (True, True)
    assert assigned.group_id == group.id
    stats = listing.statistics
    assert (stats.total_applications, stats.new_applications, stats.in_contact) == (2, 1, 1)
    assert {a.group for a in listing.applications} == {group.name, None}

    detached = application_service.remove_group(db, first.id)
    assert detached.group_id is None
    assert len(db.get_group_by_id(group.id).students) == 1
