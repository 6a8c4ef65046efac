# /educenter/models/course_model.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common_model import CamelModel


class CourseCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Unique course name.")
    description: Optional[str] = None


class CourseUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class CourseRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class CourseSummary(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    total_groups: int
    total_students: int


class CourseStats(CamelModel):
    total_courses: int
    total_students: int
    this_month_groups: int


class CourseListResponse(CamelModel):
    stats: CourseStats
    data: List[CourseSummary]
