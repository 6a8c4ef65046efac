# /educenter/services/budget_service.py

"""
The monthly budget summary.

Expected revenue of a month is what the active groups that existed by the
end of that month bill for with their current rosters. Whatever a month
failed to collect is carried forward, month by month from the billing epoch,
and added to the expected revenue of the month being reported.
"""

import logging
from decimal import Decimal
from typing import Dict, List

from educenter.core.clock import iter_months, month_end, month_key, previous_month, to_local_date
from educenter.core.config import settings
from educenter.core.exceptions import BadRequestError
from educenter.models.report_model import BudgetSummary, StaffSalary

from .currency_service import get_usd_rate, usd_string
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    return Decimal(str(value if value is not None else 0))


def expected_for_month(groups: List, year: int, month: int) -> Decimal:
    """Σ price × roster size over the groups created on or before the month's last day."""
    last_day = month_end(year, month)
    total = ZERO
    for group in groups:
        created = to_local_date(group.created_at)
        if created is not None and created > last_day:
            continue
        total += _to_decimal(group.price) * len(group.students)
    return total


def carried_over_unpaid(groups: List, paid_by_month: Dict[str, Decimal], year: int, month: int) -> Decimal:
    """Unpaid balances of every month from the epoch up to, not including, (year, month)."""
    epoch = (settings.BILLING_EPOCH_YEAR, settings.BILLING_EPOCH_MONTH)
    last = previous_month(year, month)
    carried = ZERO
    for y, m in iter_months(epoch, last):
        shortfall = expected_for_month(groups, y, m) - paid_by_month.get(month_key(y, m), ZERO)
        if shortfall > 0:
            carried += shortfall
    return carried


def budget_summary(db: DatabaseService, month: int, year: int) -> BudgetSummary:
    if not 1 <= month <= 12:
        raise BadRequestError("month must be between 1 and 12")
    period = month_key(year, month)

    groups = db.get_groups(status="active")
    frame = db.get_paid_by_month()
    paid_by_month = {row.month_for: _to_decimal(row.amount) for row in frame.itertuples(index=False)}

    carried = carried_over_unpaid(groups, paid_by_month, year, month)
    expected = expected_for_month(groups, year, month) + carried
    total_paid = paid_by_month.get(period, ZERO)

    staff_rows = db.get_users_with_salary()
    staff = [
        StaffSalary(id=u.id, first_name=u.first_name, last_name=u.last_name, role=u.role_name, salary=u.salary)
        for u in staff_rows
    ]
    total_salary = sum((_to_decimal(u.salary) for u in staff_rows), ZERO)

    unpaid = expected - total_paid
    net_profit = total_paid - total_salary
    rate = get_usd_rate()
    logger.info("Budget %s: expected=%s paid=%s salary=%s", period, expected, total_paid, total_salary)

    return BudgetSummary(
        month_for=period,
        expected_revenue=expected,
        carried_over_unpaid=carried,
        total_paid=total_paid,
        total_salary=total_salary,
        unpaid_amount=unpaid,
        net_profit=net_profit,
        usd_exchange_rate=float(rate),
        expected_revenue_usd=usd_string(expected, rate),
        total_paid_usd=usd_string(total_paid, rate),
        total_salary_usd=usd_string(total_salary, rate),
        unpaid_amount_usd=usd_string(unpaid, rate),
        net_profit_usd=usd_string(net_profit, rate),
        staff=staff,
    )
