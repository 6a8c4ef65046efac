# /tests/test_payment_service.py

from decimal import Decimal

import pytest

from educenter.core.clock import month_key, today_local
from educenter.core.exceptions import BadRequestError, NotFoundError
from educenter.models.payment_model import BudgetPaymentUpdate, PaymentCreate, PaymentUpdate
from educenter.services import payment_service


def _pay(db, student, group, amount, month_for="2024-03", payment_type="naxt"):
    return payment_service.record_payment(db, PaymentCreate(
        user_id=student.id, group_id=group.id, amount=Decimal(amount),
        month_for=month_for, payment_type=payment_type,
    ))


def _flags(db, student, group, month_for="2024-03"):
    return [p.paid for p in db.get_payments(month_for=month_for) if p.user_id == student.id and p.group_id == group.id]


def test_instalments_flip_every_row_once_the_price_is_reached(db, factory):
    student = factory.student()
    group = factory.group(price=100000, students=[student])

    first = _pay(db, student, group, 40000)
    assert first.paid is False
    assert _flags(db, student, group) == [False]

    second = _pay(db, student, group, 60000)
    assert second.paid is True
    assert _flags(db, student, group) == [True, True]


def test_other_months_and_groups_are_independent(db, factory):
    student = factory.student()
    group = factory.group(price=100000, students=[student])
    other_group = factory.group(price=100000, students=[student])

    _pay(db, student, group, 60000, month_for="2024-03")
    _pay(db, student, group, 60000, month_for="2024-04")
    _pay(db, student, other_group, 60000, month_for="2024-03")

    assert _flags(db, student, group, "2024-03") == [False]
    assert _flags(db, student, group, "2024-04") == [False]
    assert _flags(db, student, other_group, "2024-03") == [False]


def test_deleting_an_instalment_flips_the_key_back(db, factory):
    student = factory.student()
    group = factory.group(price=100000, students=[student])
    first = _pay(db, student, group, 40000)
    _pay(db, student, group, 60000)

    payment_service.delete_payment(db, first.id)

    assert _flags(db, student, group) == [False]


def test_updating_amount_and_month_reconciles_both_keys(db, factory):
    student = factory.student()
    group = factory.group(price=100000, students=[student])
    first = _pay(db, student, group, 40000)
    _pay(db, student, group, 60000)

    moved = payment_service.update_payment(db, first.id, PaymentUpdate(month_for="2024-04", amount=Decimal(100000)))

    assert moved.paid is True
    assert _flags(db, student, group, "2024-03") == [False]
    assert _flags(db, student, group, "2024-04") == [True]


def test_budget_correction_of_amount(db, factory):
    student = factory.student()
    group = factory.group(price=100000, students=[student])
    payment = _pay(db, student, group, 90000)

    corrected = payment_service.update_budget_payment(db, payment.id, BudgetPaymentUpdate(amount=Decimal(100000)))

    assert corrected.paid is True


def test_validation(db, factory):
    student = factory.student()
    group = factory.group(students=[student])
    teacher = factory.teacher()

    with pytest.raises(BadRequestError):
        _pay(db, student, group, 1000, month_for="2024-3")
    with pytest.raises(BadRequestError):
        _pay(db, student, group, 1000, month_for="2024-13")
    with pytest.raises(BadRequestError):
        _pay(db, student, group, -1)
    with pytest.raises(NotFoundError):
        _pay(db, teacher, group, 1000)
    with pytest.raises(NotFoundError):
        payment_service.record_payment(db, PaymentCreate(
            user_id=student.id, group_id=9999, amount=Decimal(1), month_for="2024-03", payment_type="click",
        ))
    assert db.get_payments() == []


def test_course_defaults_to_the_group_course(db, factory):
    student = factory.student()
    group = factory.group(students=[student])

    payment = _pay(db, student, group, 1000)

    assert payment.course_id == group.course_id


def test_unpaid_months_from_creation_to_now(db, factory):
    student = factory.student()
    group = factory.group(price=1000, students=[student])
    today = today_local()
    current = month_key(today.year, today.month)

    assert payment_service.unpaid_months(db, student.id, group.id, today=today).months == [current]

    _pay(db, student, group, 1000, month_for=current)
    assert payment_service.unpaid_months(db, student.id, group.id, today=today).months == []


def test_incomes(db, factory):
    student = factory.student()
    group = factory.group(price=1000, students=[student])
    _pay(db, student, group, 1000, month_for="2024-01")
    _pay(db, student, group, 1000, month_for="2024-02")
    _pay(db, student, group, 500, month_for="2024-03")

    assert payment_service.monthly_income(db, 1, 2024).income == Decimal("1000")
    assert payment_service.monthly_income(db, 3, 2024).income == Decimal("0")
    assert payment_service.yearly_income(db, 2024).income == Decimal("2000")
    with pytest.raises(BadRequestError):
        payment_service.monthly_income(db, 13, 2024)


def test_paid_and_unpaid_filters(db, factory):
    alice = factory.student(first_name="Alice")
    bob = factory.student(first_name="Bob")
    group = factory.group(price=1000, students=[alice, bob])
    _pay(db, alice, group, 1000)
    _pay(db, bob, group, 300)

    paid = payment_service.filter_payments(db, True, student_name="ali")
    unpaid = payment_service.filter_payments(db, False, month_for="2024-03")

    assert [p.user_id for p in paid] == [alice.id]
    assert [p.user_id for p in unpaid] == [bob.id]
