# /educenter/models/payment_model.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .common_model import CamelModel, Money

PaymentType = Literal["click", "naxt", "percheslinei"]


class PaymentCreate(CamelModel):
    user_id: int
    group_id: int
    course_id: Optional[int] = None
    amount: Money = Field(..., description="Amount in UZS; must not be negative.")
    month_for: str = Field(..., description="Billing month, YYYY-MM.")
    payment_type: PaymentType


class PaymentUpdate(CamelModel):
    user_id: Optional[int] = None
    group_id: Optional[int] = None
    course_id: Optional[int] = None
    amount: Optional[Money] = None
    month_for: Optional[str] = None
    payment_type: Optional[PaymentType] = None


class BudgetPaymentUpdate(CamelModel):
    amount: Optional[Money] = None
    payment_type: Optional[PaymentType] = None


class PaymentUserBrief(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None


class PaymentGroupBrief(CamelModel):
    id: int
    name: str
    price: Money


class PaymentRead(CamelModel):
    id: int
    amount: Money
    paid: bool
    month_for: str
    payment_type: str
    created_at: Optional[datetime] = None
    user_id: int
    group_id: int
    course_id: Optional[int] = None
    user: Optional[PaymentUserBrief] = None
    group: Optional[PaymentGroupBrief] = None


class IncomeResponse(CamelModel):
    period: str
    income: Money


class UnpaidMonthsResponse(CamelModel):
    user_id: int
    group_id: int
    months: List[str]
