# /educenter/services/dashboard_service.py

import datetime
from decimal import Decimal
from typing import Optional

from educenter.core.clock import MONTH_ABBREVIATIONS, month_key, today_local
from educenter.models.report_model import Dashboard, MonthlyRevenue

from .currency_service import get_usd_rate, usd_string
from .database_service import DatabaseService


def build_dashboard(db: DatabaseService, today: Optional[datetime.date] = None) -> Dashboard:
    """Headline figures for the admin home page, for the year and month of `today`."""
    today = today or today_local()

    total_students = db.count_distinct_students_in_active_groups()
    active_groups = db.count_groups(status="active")

    frame = db.get_paid_by_month(prefix=f"{today.year:04d}-")
    by_month = dict(zip(frame["month_for"], frame["amount"]))
    monthly = [
        MonthlyRevenue(month=name, income=Decimal(str(by_month.get(month_key(today.year, index + 1), 0))))
        for index, name in enumerate(MONTH_ABBREVIATIONS)
    ]
    annual = sum((entry.income for entry in monthly), Decimal("0"))

    active_ids = set(db.get_student_ids_in_active_groups())
    paid_ids = db.get_paid_user_ids_for_month(month_key(today.year, today.month))
    rate = get_usd_rate()

    return Dashboard(
        total_students=total_students,
        active_groups=active_groups,
        average_students_per_group=round(total_students / active_groups) if active_groups else 0,
        monthly_revenue=monthly,
        annual_revenue=annual,
        annual_revenue_usd=usd_string(annual, rate),
        usd_exchange_rate=float(rate),
        paid_students=len(paid_ids),
        unpaid_students=len(active_ids - paid_ids),
        report_date=today.isoformat(),
    )
