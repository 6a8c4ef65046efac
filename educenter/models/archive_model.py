# /educenter/models/archive_model.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from .common_model import CamelModel, Money


class ArchiveCreate(CamelModel):
    """
    Either `user_id` (snapshot an existing user) or the snapshot fields
    themselves must be supplied.
    """
    user_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    username: Optional[str] = None
    address: Optional[str] = None
    specialty: Optional[str] = None
    percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    role_id: Optional[int] = None
    remove_user: bool = Field(default=False, description="Delete the live user after taking the snapshot.")


class ArchivedUserRead(CamelModel):
    id: int
    original_user_id: Optional[int] = None
    first_name: str
    last_name: str
    phone: str
    username: Optional[str] = None
    address: Optional[str] = None
    specialty: Optional[str] = None
    salary: Optional[Money] = None
    percent: Optional[Money] = None
    course_id: Optional[int] = None
    role_id: int
    archived_at: Optional[datetime] = None
