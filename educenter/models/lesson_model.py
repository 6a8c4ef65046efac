# /educenter/models/lesson_model.py

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .attendance_model import AttendanceRead
from .common_model import CamelModel


class LessonCreate(CamelModel):
    group_id: int
    lesson_name: str = Field(..., min_length=1)


class LessonUpdate(CamelModel):
    lesson_name: Optional[str] = Field(default=None, min_length=1)


class LessonGroupBrief(CamelModel):
    id: int
    name: str
    teacher_id: Optional[int] = None


class LessonRead(CamelModel):
    id: int
    lesson_name: str
    lesson_number: int
    lesson_date: datetime
    end_date: datetime
    group_id: int
    group: Optional[LessonGroupBrief] = None


class LessonWithAttendance(LessonRead):
    attendances: List[AttendanceRead] = []


class LessonStatistics(CamelModel):
    lesson: LessonRead
    teacher: Optional[str] = None
    course: Optional[str] = None
    total_students: int
    present_count: int
    attendance_rate: float
