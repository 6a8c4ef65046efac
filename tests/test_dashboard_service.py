# /tests/test_dashboard_service.py

import datetime
from decimal import Decimal

from educenter.models.payment_model import PaymentCreate
from educenter.services import dashboard_service, payment_service

TODAY = datetime.date(2024, 5, 10)


def _pay(db, student, group, month_for):
    payment_service.record_payment(db, PaymentCreate(
        user_id=student.id, group_id=group.id, amount=Decimal(100000), month_for=month_for, payment_type="click",
    ))


def test_headline_figures(db, factory):
    first, shared, third = factory.student(), factory.student(), factory.student()
    one = factory.group(price=100000, students=[first, shared])
    two = factory.group(price=100000, students=[shared, third])
    factory.group(price=100000, students=[factory.student()], status="completed")
    _pay(db, first, one, "2024-05")
    _pay(db, shared, two, "2024-02")
    _pay(db, third, two, "2023-12")

    dashboard = dashboard_service.build_dashboard(db, today=TODAY)

    assert dashboard.total_students == 3
    assert dashboard.active_groups == 2
    assert dashboard.average_students_per_group == 2
    assert [m.month for m in dashboard.monthly_revenue][:3] == ["Jan", "Feb", "Mar"]
    assert len(dashboard.monthly_revenue) == 12
    assert dashboard.monthly_revenue[1].income == Decimal("100000")
    assert dashboard.monthly_revenue[4].income == Decimal("100000")
    assert dashboard.annual_revenue == Decimal("200000")
    assert dashboard.annual_revenue_usd == "$15.80"
    assert (dashboard.paid_students, dashboard.unpaid_students) == (1, 2)
    assert dashboard.report_date == "2024-05-10"


def test_reading_the_dashboard_changes_nothing(db, factory):
    student = factory.student()
    group = factory.group(students=[student])
    _pay(db, student, group, "2024-05")

    first = dashboard_service.build_dashboard(db, today=TODAY)
    second = dashboard_service.build_dashboard(db, today=TODAY)

    assert first.model_dump() == second.model_dump()


def test_empty_center(db):
    dashboard = dashboard_service.build_dashboard(db, today=TODAY)

    assert (dashboard.total_students, dashboard.active_groups, dashboard.average_students_per_group) == (0, 0, 0)
    assert dashboard.annual_revenue == 0
