# /educenter/models/group_model.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .common_model import CamelModel, Money

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
GroupStatus = Literal["active", "planned", "completed"]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=1)
    course_id: int
    price: Money = Field(..., ge=0)
    teacher_id: Optional[int] = None
    user_ids: List[int] = Field(default_factory=list, description="Students enrolled on creation.")
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    days_of_week: List[Weekday] = Field(default_factory=list)


class GroupUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Money] = Field(default=None, ge=0)
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    days_of_week: Optional[List[Weekday]] = None
    status: Optional[GroupStatus] = None
    course_id: Optional[int] = None
    teacher_id: Optional[int] = None
    # When present, the roster is replaced with exactly these students.
    user_ids: Optional[List[int]] = None


class PersonBrief(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    username: Optional[str] = None


class CourseBrief(CamelModel):
    id: int
    name: str


class GroupRead(CamelModel):
    id: int
    name: str
    price: Money
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    days_of_week: List[str] = []
    status: str
    created_at: Optional[datetime] = None
    course_id: int
    teacher_id: Optional[int] = None
    course: Optional[CourseBrief] = None
    teacher: Optional[PersonBrief] = None
    students: List[PersonBrief] = []
    teacher_salary: Optional[Money] = None

    @classmethod
    def from_group(cls, group, teacher_salary=None) -> "GroupRead":
        read = cls.model_validate(group)
        read.teacher_salary = teacher_salary
        return read


class TransferResult(CamelModel):
    from_group: GroupRead
    to_group: GroupRead
    from_teacher_salary: Optional[Money] = None
    to_teacher_salary: Optional[Money] = None


class GroupListItem(CamelModel):
    id: int
    name: str
    teacher: str
    course: str
    student_count: int
    status: str
    price: Money
    data: str
    data_days: List[str] = []


class GroupListStatistics(CamelModel):
    total_groups: int
    total_students: int
    active_courses: int
    total_groups_this_month: int


class GroupListResponse(CamelModel):
    statistics: GroupListStatistics
    groups: List[GroupListItem]


class TeacherGroupItem(CamelModel):
    id: int
    name: str
    student_count: int
    days_of_week: str
    time: str
    course: str


class TeacherGroupStats(CamelModel):
    total_groups: int
    new_groups_last_week: int
    active_groups: int
    total_students: int


class TeacherGroupsResponse(CamelModel):
    stats: TeacherGroupStats
    groups: List[TeacherGroupItem]


class ScheduleAttendance(CamelModel):
    date: str
    status: str
    grade: Optional[int] = None


class ScheduleStudent(CamelModel):
    id: int
    first_name: str
    last_name: str
    attendances: List[ScheduleAttendance] = []


class TeacherSchedule(CamelModel):
    id: int
    name: str
    teacher: str
    course: str
    start_time: str
    end_time: str
    days_of_week: str
    created_at: str
    price: Money
    total_lessons: int
    lesson_dates: List[int]
    students: List[ScheduleStudent]


