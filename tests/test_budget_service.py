# /tests/test_budget_service.py

import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from educenter.core.clock import month_key, today_local
from educenter.core.exceptions import BadRequestError
from educenter.models.payment_model import PaymentCreate
from educenter.services import budget_service, compensation_service, payment_service


def _group(created, price, size):
    return SimpleNamespace(created_at=created, price=price, students=[object()] * size)


def test_expected_revenue_ignores_groups_created_later():
    groups = [
        _group(datetime.datetime(2024, 1, 10, tzinfo=datetime.timezone.utc), 100, 2),
        _group(datetime.datetime(2024, 3, 1, tzinfo=datetime.timezone.utc), 50, 4),
    ]

    assert budget_service.expected_for_month(groups, 2023, 12) == 0
    assert budget_service.expected_for_month(groups, 2024, 2) == 200
    assert budget_service.expected_for_month(groups, 2024, 3) == 400


def test_only_shortfalls_are_carried_forward():
    groups = [_group(datetime.datetime(2024, 1, 10, tzinfo=datetime.timezone.utc), 100, 2)]
    paid = {"2024-01": Decimal(200), "2024-02": Decimal(50), "2024-03": Decimal(300)}

    # February is short by 150; March's overpayment does not cancel it.
    assert budget_service.carried_over_unpaid(groups, paid, 2024, 4) == 150
    assert budget_service.carried_over_unpaid(groups, paid, 2024, 1) == 0


def test_summary_for_the_current_month(db, factory):
    today = today_local()
    period = month_key(today.year, today.month)
    teacher = factory.teacher(percent=10)
    payer, partial = factory.student(), factory.student()
    group = factory.group(teacher=teacher, price=100000, students=[payer, partial])
    with db.transaction():
        compensation_service.refresh_teacher_salary(db, teacher.id)
    for student, amount in ((payer, 100000), (partial, 40000)):
        payment_service.record_payment(db, PaymentCreate(
            user_id=student.id, group_id=group.id, amount=Decimal(amount), month_for=period, payment_type="click",
        ))

    summary = budget_service.budget_summary(db, today.month, today.year)

    assert summary.month_for == period
    assert summary.expected_revenue == Decimal("200000")
    assert summary.carried_over_unpaid == 0
    # Only fully settled keys count as paid.
    assert summary.total_paid == Decimal("100000")
    assert summary.total_salary == Decimal("20000")
    assert summary.unpaid_amount == Decimal("100000")
    assert summary.net_profit == Decimal("80000")
    assert summary.expected_revenue_usd == "$15.80"
    assert summary.usd_exchange_rate == pytest.approx(0.000079)
    assert [s.id for s in summary.staff] == [teacher.id]


def test_month_out_of_range(db):
    with pytest.raises(BadRequestError):
        budget_service.budget_summary(db, 13, 2024)
