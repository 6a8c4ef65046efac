# /educenter/models/application_model.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common_model import CamelModel


class ApplicationCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=3)
    group_id: Optional[int] = None
    course_id: Optional[int] = None


class ApplicationUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=3)
    status: Optional[bool] = None
    is_contacted: Optional[bool] = None


class ApplicationRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: str
    status: bool
    is_contacted: bool
    created_at: Optional[datetime] = None
    user_id: Optional[int] = None
    group_id: Optional[int] = None
    course_id: Optional[int] = None


class ApplicationListItem(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: str
    created_at: Optional[datetime] = None
    status: bool
    is_contacted: bool
    group: Optional[str] = None


class ApplicationStatistics(CamelModel):
    total_applications: int
    new_applications: int
    in_contact: int


class ApplicationListResponse(CamelModel):
    statistics: ApplicationStatistics
    applications: List[ApplicationListItem]
