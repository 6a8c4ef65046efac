# /educenter/models/attendance_model.py

import datetime
from typing import List, Literal, Optional

from pydantic import Field

from .common_model import CamelModel

AttendanceStatus = Literal["present", "absent", "late"]
TeacherAttendanceStatus = Literal["absent_with_reason", "absent_without_reason"]


class AttendanceItem(CamelModel):
    student_id: int
    status: str = Field(..., description="present, absent or late.")
    grade: Optional[int] = Field(default=None, description="Optional grade between 0 and 100.")


class AttendanceBatch(CamelModel):
    """
    A batch of marks for one group and one date. The `date` is kept as a
    string so a malformed value reaches the service and is reported with the
    same message as every other rule.
    """
    group_id: int
    date: str
    attendances: List[AttendanceItem] = Field(..., min_length=1)


class AttendanceBulkUpdate(CamelModel):
    attendances: List[AttendanceItem] = Field(..., min_length=1)


class TeacherAttendanceCreate(CamelModel):
    teacher_id: int
    group_id: int
    date: str
    status: TeacherAttendanceStatus


class AttendanceGroupInfo(CamelModel):
    id: int
    name: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    days_of_week: List[str] = []


class AttendanceTeacherInfo(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None


class AttendanceStudentMark(CamelModel):
    id: int
    first_name: str
    last_name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    grade: Optional[int] = None
    status: str


class AttendanceBatchResult(CamelModel):
    date: datetime.date
    group: AttendanceGroupInfo
    teacher: AttendanceTeacherInfo
    students: List[AttendanceStudentMark]


class AttendanceUserBrief(CamelModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None


class AttendanceRead(CamelModel):
    id: int
    user_id: int
    group_id: int
    date: datetime.date
    status: str
    grade: Optional[int] = None
    marked_by_id: Optional[int] = None
    created_at: Optional[datetime.datetime] = None
    user: Optional[AttendanceUserBrief] = None


class TeacherAttendanceRead(CamelModel):
    id: int
    teacher_name: str
    group_name: Optional[str] = None
    date: datetime.date
    status: str
    marked_by: Optional[str] = None


class MissingAttendance(CamelModel):
    group_id: int
    group_name: str
    date: datetime.date
    lesson_time: str
    teacher: Optional[str] = None
    phone: Optional[str] = None
    reason: str = "Attendance not recorded"


class DailyAttendanceEntry(CamelModel):
    user_id: int
    user_name: str
    status: str
    grade: Optional[int] = None
    date: datetime.date


class DailyAttendance(CamelModel):
    total_students: int
    present: int
    absent: int
    late: int
    attendances: List[DailyAttendanceEntry]


class StudentAttendanceStats(CamelModel):
    user: AttendanceUserBrief
    present: int
    absent: int
    late: int
    total: int
    average_grade: Optional[float] = None


class HistoryStatistics(CamelModel):
    total_students: int
    present: int
    absent: int
    late: int


class HistoryStudent(CamelModel):
    user_id: int
    user_name: str
    phone: Optional[str] = None
    group_name: str
    status: str
    grade: Optional[int] = None


class AttendanceHistory(CamelModel):
    statistics: HistoryStatistics
    date: datetime.date
    exportable: bool = True
    students: List[HistoryStudent]
