# /educenter/models/user_model.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .common_model import CamelModel, Money
from .role_model import RoleRead


class UserCreate(CamelModel):
    """
    Payload for creating any kind of user. `role` defaults to "student".
    Teachers must send `percent`; `salary` is derived and therefore not part
    of the contract.
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=3)
    username: Optional[str] = Field(default=None, min_length=3)
    password: Optional[str] = Field(default=None, min_length=4)
    address: Optional[str] = None
    specialty: Optional[str] = None
    percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    role: Optional[str] = None
    course_id: Optional[int] = None
    group_id: Optional[int] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=3)
    username: Optional[str] = Field(default=None, min_length=3)
    password: Optional[str] = Field(default=None, min_length=4)
    address: Optional[str] = None
    specialty: Optional[str] = None
    percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    role: Optional[str] = None


class UserGroupBrief(CamelModel):
    id: int
    name: str
    status: str
    course_id: int


class UserRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: str
    username: Optional[str] = None
    address: Optional[str] = None
    specialty: Optional[str] = None
    salary: Optional[Money] = None
    percent: Optional[Money] = None
    course_id: Optional[int] = None
    created_at: Optional[datetime] = None
    role: Optional[RoleRead] = None
    groups: List[UserGroupBrief] = []
    groups_as_teacher: List[UserGroupBrief] = []


class StudentBrief(CamelModel):
    id: int
    full_name: str
    phone: str


class StudentGroupView(CamelModel):
    id: int
    name: str
    teacher: Optional[str] = None
    course: Optional[str] = None
    student_count: int
    status: str
    price: Money
    data: Optional[str] = Field(default=None, description="Start and end time, e.g. '14:00 16:00'.")
    data_days: List[str] = []


class StudentMonthPayment(CamelModel):
    """A payment of the requested month, or an unpaid placeholder when none exists."""
    id: Optional[int] = None
    amount: Money
    month_for: str
    paid: bool
    payment_type: Optional[str] = None
    group_id: int
    created_at: Optional[datetime] = None


class StudentPaymentView(CamelModel):
    id: int
    full_name: str
    phone: str
    address: Optional[str] = None
    groups: List[StudentGroupView] = []
    payments: List[StudentMonthPayment] = []


class WorkerRead(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    specialty: Optional[str] = None
    salary: Optional[Money] = None
    role: Optional[str] = None
    groups: List[str] = []
    courses: Optional[List[str]] = None
