# /educenter/services/debtor_service.py

"""
Who owes what for the current billing month.

A student of an active group is a debtor when the settled payments for that
group and month fall short of the group's price; instalments still marked
unpaid do not count. The shortfall is the debt. The unpaid month shown is
the one after the latest fully paid month, or the current month when the
student never paid in full.
"""

import datetime
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Optional, Tuple

from educenter.core.clock import month_key, next_month, parse_month_for, today_local
from educenter.core.permissions import RoleName
from educenter.models.report_model import Debtor, DebtorList

from .database_service import DatabaseService

ZERO = Decimal("0")


def _matches(value: Optional[str], fragment: Optional[str]) -> bool:
    return not fragment or fragment.strip().lower() in (value or "").lower()


def _unpaid_month(paid_months, current: str) -> str:
    earlier = [m for m in paid_months if m < current]
    if not earlier:
        return current
    return month_key(*next_month(*parse_month_for(max(earlier))))


def list_debtors(
    db: DatabaseService,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    group_id: Optional[int] = None,
    today: Optional[datetime.date] = None,
) -> DebtorList:
    today = today or today_local()
    current = month_key(today.year, today.month)

    paid_sums: Dict[Tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
    for payment in db.get_payments(paid=True, month_for=current, group_id=group_id):
        paid_sums[(payment.user_id, payment.group_id)] += Decimal(str(payment.amount))

    groups = db.get_groups(status="active")
    if group_id:
        groups = [group for group in groups if group.id == group_id]

    debtors = []
    for group in sorted(groups, key=lambda g: g.id):
        price = Decimal(str(group.price))
        for student in sorted(group.students, key=lambda s: s.id):
            if student.role_name != RoleName.STUDENT.value:
                continue
            if not (_matches(student.first_name, first_name) and _matches(student.last_name, last_name)):
                continue
            debt = price - paid_sums[(student.id, group.id)]
            if debt <= 0:
                continue
            debtors.append(Debtor(
                user_id=student.id,
                full_name=student.full_name,
                group_id=group.id,
                group=group.name,
                debt=debt,
                unpaid_month=_unpaid_month(db.get_paid_months(student.id, group.id), current),
            ))

    return DebtorList(
        month_for=current,
        total_debt=sum((d.debt for d in debtors), ZERO),
        debtor_count=len(debtors),
        debtors=debtors,
    )
