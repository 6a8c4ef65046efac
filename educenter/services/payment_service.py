# /educenter/services/payment_service.py

"""
The billing ledger.

A student pays for a group month by month, possibly in several instalments.
Every row of one (student, group, monthFor) key carries the same `paid` flag,
and that flag is true exactly when the amounts of the key add up to at least
the group's price. `_reconcile_key` restores this after any insert, update or
delete, inside the transaction of the change and with the key's rows locked.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional

from educenter.core.clock import iter_months, month_key, parse_month_for, today_local, to_local_date
from educenter.core.exceptions import BadRequestError, NotFoundError
from educenter.core.permissions import RoleName
from educenter.models.common_model import MessageResponse
from educenter.models.payment_model import (
    BudgetPaymentUpdate, IncomeResponse, PaymentCreate, PaymentRead, PaymentUpdate, UnpaidMonthsResponse,
)

from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    return Decimal(str(value if value is not None else 0))


def _check_amount(amount) -> Decimal:
    amount = _to_decimal(amount)
    if amount < 0:
        raise BadRequestError("Amount must not be negative")
    return amount


def _get_student(db: DatabaseService, user_id: int):
    student = db.get_user_with_role(user_id, RoleName.STUDENT.value)
    if student is None:
        raise NotFoundError("Student not found")
    return student


def _get_group(db: DatabaseService, group_id: int):
    group = db.get_group_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


def _get_payment(db: DatabaseService, payment_id: int):
    payment = db.get_payment(payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return payment


def _reconcile_key(db: DatabaseService, user_id: int, group_id: int, month_for: str) -> bool:
    """Sets the paid flag on every row of the key from the key's total. Returns the flag."""
    group = db.get_group_by_id(group_id)
    rows = db.get_payments_for_key(user_id, group_id, month_for)
    total = sum((_to_decimal(row.amount) for row in rows), Decimal("0"))
    paid = group is not None and bool(rows) and total >= _to_decimal(group.price)
    for row in rows:
        if row.paid != paid:
            db.update_payment(row, {"paid": paid})
    logger.info(
        "Payments of user %s group %s month %s reconciled: total=%s paid=%s",
        user_id, group_id, month_for, total, paid,
    )
    return paid


# --- Mutations ---

def record_payment(db: DatabaseService, payload: PaymentCreate) -> PaymentRead:
    parse_month_for(payload.month_for)
    amount = _check_amount(payload.amount)

    with db.transaction():
        _get_student(db, payload.user_id)
        # Serialises concurrent payments of the same student.
        db.get_user_for_update(payload.user_id)
        group = _get_group(db, payload.group_id)
        course_id = payload.course_id or group.course_id
        if payload.course_id and db.get_course_by_id(payload.course_id) is None:
            raise NotFoundError("Course not found")

        # Result unused. Only takes the lock on the key's rows until commit.
        db.get_payments_for_key(payload.user_id, group.id, payload.month_for)
        payment = db.add_payment({
            "user_id": payload.user_id,
            "group_id": group.id,
            "course_id": course_id,
            "amount": amount,
            "month_for": payload.month_for,
            "payment_type": payload.payment_type,
            "paid": False,
        })
        _reconcile_key(db, payload.user_id, group.id, payload.month_for)
        db.refresh(payment)

    return PaymentRead.model_validate(payment)


def update_payment(db: DatabaseService, payment_id: int, payload: PaymentUpdate) -> PaymentRead:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    with db.transaction():
        payment = _get_payment(db, payment_id)
        old_key = (payment.user_id, payment.group_id, payment.month_for)

        if "month_for" in changes:
            parse_month_for(changes["month_for"])
        if "amount" in changes:
            changes["amount"] = _check_amount(changes["amount"])
        if "user_id" in changes:
            _get_student(db, changes["user_id"])
        if "group_id" in changes:
            group = _get_group(db, changes["group_id"])
            changes.setdefault("course_id", group.course_id)
        if changes.get("course_id") and db.get_course_by_id(changes["course_id"]) is None:
            raise NotFoundError("Course not found")

        db.update_payment(payment, changes)
        new_key = (payment.user_id, payment.group_id, payment.month_for)
        for key in sorted({old_key, new_key}):
            _reconcile_key(db, *key)
        db.refresh(payment)

    return PaymentRead.model_validate(payment)


def update_budget_payment(db: DatabaseService, payment_id: int, payload: BudgetPaymentUpdate) -> PaymentRead:
    return update_payment(db, payment_id, PaymentUpdate(**payload.model_dump(exclude_unset=True)))


def delete_payment(db: DatabaseService, payment_id: int) -> MessageResponse:
    with db.transaction():
        payment = _get_payment(db, payment_id)
        key = (payment.user_id, payment.group_id, payment.month_for)
        db.delete_payment(payment)
        _reconcile_key(db, *key)
    return MessageResponse(message="Payment deleted successfully")


# --- Reads ---

def list_payments(db: DatabaseService) -> List[PaymentRead]:
    return [PaymentRead.model_validate(p) for p in db.get_payments()]


def get_payment(db: DatabaseService, payment_id: int) -> PaymentRead:
    return PaymentRead.model_validate(_get_payment(db, payment_id))


def payment_report(db: DatabaseService, group_id: Optional[int] = None, student_name: Optional[str] = None) -> List[PaymentRead]:
    """Payments made for active groups, newest first."""
    payments = db.get_payments(
        group_id=group_id, student_name=student_name, active_groups_only=True, newest_first=True,
    )
    return [PaymentRead.model_validate(p) for p in payments]


def filter_payments(
    db: DatabaseService,
    paid: bool,
    student_name: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    group_id: Optional[int] = None,
    month_for: Optional[str] = None,
) -> List[PaymentRead]:
    if month_for:
        parse_month_for(month_for)
    payments = db.get_payments(
        paid=paid, student_name=student_name, first_name=first_name, last_name=last_name,
        group_id=group_id, month_for=month_for, newest_first=True,
    )
    return [PaymentRead.model_validate(p) for p in payments]


def billing_start(db: DatabaseService, group) -> datetime.date:
    """First day a group bills for: its first lesson, or its creation date."""
    first_lesson = db.get_first_lesson(group.id)
    if first_lesson is not None:
        return first_lesson.lesson_day
    return to_local_date(group.created_at) or today_local()


def unpaid_months(db: DatabaseService, user_id: int, group_id: int, today: Optional[datetime.date] = None) -> UnpaidMonthsResponse:
    today = today or today_local()
    _get_student(db, user_id)
    group = _get_group(db, group_id)

    start = billing_start(db, group)
    paid = db.get_paid_months(user_id, group_id)
    months = [
        month_key(year, month)
        for year, month in iter_months((start.year, start.month), (today.year, today.month))
        if month_key(year, month) not in paid
    ]
    return UnpaidMonthsResponse(user_id=user_id, group_id=group_id, months=months)


def monthly_income(db: DatabaseService, month: int, year: int) -> IncomeResponse:
    if not 1 <= month <= 12:
        raise BadRequestError("month must be between 1 and 12")
    period = month_key(year, month)
    return IncomeResponse(period=period, income=_to_decimal(db.sum_paid_for_month(period)))


def yearly_income(db: DatabaseService, year: int) -> IncomeResponse:
    frame = db.get_paid_by_month(prefix=f"{year:04d}-")
    total = sum((_to_decimal(value) for value in frame["amount"]), Decimal("0"))
    return IncomeResponse(period=f"{year:04d}", income=total)
