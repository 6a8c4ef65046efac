# /tests/test_user_service.py

import pytest

from educenter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from educenter.models.payment_model import PaymentCreate
from educenter.models.user_model import UserCreate, UserUpdate
from educenter.services import payment_service, user_service


def _create(db, **fields):
    data = {"first_name": "Nodir", "last_name": "Aliyev", "phone": "+998971234567"}
    data.update(fields)
    return user_service.create_user(db, UserCreate(**data))


def test_creating_a_student_into_a_group_pays_the_teacher(db, factory):
    teacher = factory.teacher(percent=10)
    group = factory.group(teacher=teacher, price=100000)

    student = _create(db, group_id=group.id, course_id=group.course_id, username="nodir", password="secret1")

    assert student.role.name == "student"
    assert [g.id for g in student.groups] == [group.id]
    assert db.get_user_by_id(teacher.id).salary == 10000
    assert db.get_user_by_id(student.id).password_hash != "secret1"


def test_creation_rules(db, factory):
    factory.student(phone="+998971234567")

    with pytest.raises(ConflictError):
        _create(db)
    with pytest.raises(BadRequestError):
        _create(db, phone="+998970000001", role="janitor")
    with pytest.raises(BadRequestError):
        _create(db, phone="+998970000002", role="teacher")
    with pytest.raises(NotFoundError):
        _create(db, phone="+998970000003", group_id=999)


def test_teacher_gets_a_computed_salary(db):
    teacher = _create(db, role="teacher", percent=15)

    assert teacher.salary == 0
    assert teacher.percent == 15


def test_update_me_keeps_the_role(db, factory):
    student = factory.student()

    updated = user_service.update_me(db, student.id, UserUpdate(first_name="Renamed", role="admin"))

    assert updated.first_name == "Renamed"
    assert updated.role.name == "student"


def test_percent_change_recomputes_salary(db, factory):
    teacher = factory.teacher(percent=10)
    factory.group(teacher=teacher, price=100000, students=[factory.student()])

    updated = user_service.update_user(db, teacher.id, UserUpdate(percent=50))

    assert updated.salary == 50000


def test_deleting_a_student_shrinks_the_teacher_salary(db, factory):
    teacher = factory.teacher(percent=10)
    leaving, staying = factory.student(), factory.student()
    group = factory.group(teacher=teacher, price=100000, students=[leaving, staying])

    user_service.delete_user(db, leaving.id)

    assert db.get_user_by_id(teacher.id).salary == 10000
    assert [s.id for s in db.get_group_by_id(group.id).students] == [staying.id]
    with pytest.raises(NotFoundError):
        user_service.get_user(db, leaving.id)


def test_students_payment_view(db, factory):
    payer, debtor = factory.student(), factory.student()
    factory.student()
    group = factory.group(price=100000, students=[payer, debtor])
    payment_service.record_payment(db, PaymentCreate(
        user_id=payer.id, group_id=group.id, amount=100000, month_for="2024-03", payment_type="click",
    ))

    everyone = user_service.students_payment_view(db, month_for="2024-03")
    paid = user_service.students_payment_view(db, paid=True, month_for="2024-03")
    unpaid = user_service.students_payment_view(db, paid=False, group_id=group.id, month_for="2024-03")

    assert len(everyone) == 3
    assert [v.id for v in paid] == [payer.id]
    assert [v.id for v in unpaid] == [debtor.id]
    placeholder = unpaid[0].payments[0]
    assert (placeholder.id, placeholder.amount, placeholder.paid) == (None, 0, False)


def test_workers_list_staff_with_their_groups(db, factory):
    teacher = factory.teacher()
    factory.admin()
    factory.student()
    group = factory.group(teacher=teacher)

    workers = {w.id: w for w in user_service.list_workers(db)}

    assert len(workers) == 2
    assert workers[teacher.id].groups == [group.name]
    assert workers[teacher.id].courses == [group.course.name]
