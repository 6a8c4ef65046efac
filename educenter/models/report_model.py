# /educenter/models/report_model.py

"""
Contracts for the read-only reports: budget summary, debtor list and the
admin dashboard.
"""

from typing import List, Optional

from pydantic import Field

from .common_model import CamelModel, Money


class StaffSalary(CamelModel):
    id: int
    first_name: str
    last_name: str
    role: Optional[str] = None
    salary: Money


class BudgetSummary(CamelModel):
    month_for: str
    expected_revenue: Money
    carried_over_unpaid: Money
    total_paid: Money
    total_salary: Money
    unpaid_amount: Money
    net_profit: Money
    usd_exchange_rate: float
    expected_revenue_usd: str = Field(..., alias="expectedRevenueUSD")
    total_paid_usd: str = Field(..., alias="totalPaidUSD")
    total_salary_usd: str = Field(..., alias="totalSalaryUSD")
    unpaid_amount_usd: str = Field(..., alias="unpaidAmountUSD")
    net_profit_usd: str = Field(..., alias="netProfitUSD")
    staff: List[StaffSalary]


class Debtor(CamelModel):
    user_id: int
    full_name: str
    group_id: int
    group: str
    debt: Money
    unpaid_month: str


class DebtorList(CamelModel):
    month_for: str
    total_debt: Money
    debtor_count: int
    debtors: List[Debtor]


class MonthlyRevenue(CamelModel):
    month: str
    income: Money


class Dashboard(CamelModel):
    total_students: int
    active_groups: int
    average_students_per_group: int
    monthly_revenue: List[MonthlyRevenue]
    annual_revenue: Money
    annual_revenue_usd: str = Field(..., alias="annualRevenueUSD")
    usd_exchange_rate: float
    paid_students: int
    unpaid_students: int
    report_date: str
