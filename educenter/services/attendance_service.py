# /educenter/services/attendance_service.py

"""
The date-keyed attendance ledger.

A teacher marks a whole batch of students of one group for one date. Every
item of the batch is validated before anything is written, so a request
either records all of its marks or none of them. `create_attendance` refuses
marks that already exist; `create_or_update_attendance` overwrites them.
"""

import datetime
import logging
from typing import Dict, List, Optional

import pandas as pd

from educenter.core.clock import app_timezone, now_local, parse_date, today_local, weekday_name
from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from educenter.core.permissions import Principal, RoleName
from educenter.db.models.attendance_models import ATTENDANCE_STATUSES
from educenter.models.attendance_model import (
    AttendanceBatch, AttendanceBatchResult, AttendanceGroupInfo, AttendanceHistory, AttendanceItem,
    AttendanceRead, AttendanceStudentMark, AttendanceTeacherInfo, AttendanceUserBrief, DailyAttendance,
    DailyAttendanceEntry, HistoryStatistics, HistoryStudent, MissingAttendance, StudentAttendanceStats,
    TeacherAttendanceCreate, TeacherAttendanceRead,
)
from educenter.models.common_model import MessageResponse

from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _get_group(db: DatabaseService, group_id: int):
    group = db.get_group_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


def _roster(group) -> Dict[int, object]:
    return {member.id: member for member in group.students if member.role_name == RoleName.STUDENT.value}


def _validate_batch(db: DatabaseService, group_id: int, date_value: str, items: List[AttendanceItem], actor: Principal):
    """Checks ownership, the schedule and every item. Returns (group, day, roster)."""
    group = _get_group(db, group_id)
    if group.teacher_id != actor.id:
        raise ForbiddenError("Only the teacher of this group can mark attendance")

    day = parse_date(date_value)
    days = group.days_of_week or []
    if weekday_name(day) not in days:
        raise BadRequestError(
            f"{day.isoformat()} is a {weekday_name(day)}; this group meets on: {', '.join(days) or 'no days'}"
        )

    roster = _roster(group)
    seen = set()
    for item in items:
        if item.student_id in seen:
            raise BadRequestError(f"Student {item.student_id} appears more than once")
        seen.add(item.student_id)
        if item.student_id not in roster:
            raise BadRequestError(f"Student {item.student_id} is not in this group")
        if item.status not in ATTENDANCE_STATUSES:
            raise BadRequestError("Invalid status. Must be one of: present, absent, late")
        if item.grade is not None and not 0 <= item.grade <= 100:
            raise BadRequestError("Grade must be between 0 and 100")
    return group, day, roster


def _batch_result(group, day: datetime.date, roster, items: List[AttendanceItem]) -> AttendanceBatchResult:
    teacher = group.teacher
    return AttendanceBatchResult(
        date=day,
        group=AttendanceGroupInfo.model_validate(group),
        teacher=AttendanceTeacherInfo.model_validate(teacher),
        students=[
            AttendanceStudentMark(
                id=item.student_id,
                first_name=roster[item.student_id].first_name,
                last_name=roster[item.student_id].last_name,
                address=roster[item.student_id].address,
                phone=roster[item.student_id].phone,
                grade=item.grade,
                status=item.status,
            )
            for item in items
        ],
    )


def _write_batch(db: DatabaseService, group_id: int, date_value: str, items: List[AttendanceItem],
                 actor: Principal, overwrite: bool) -> AttendanceBatchResult:
    with db.transaction():
        group, day, roster = _validate_batch(db, group_id, date_value, items, actor)
        existing = db.get_attendances_by_user_keys(group.id, day, [item.student_id for item in items])
        if existing and not overwrite:
            student_id = sorted(existing)[0]
            raise ConflictError(f"Attendance already recorded for student {student_id} on {day.isoformat()}")

        for item in items:
            row = existing.get(item.student_id)
            data = {"status": item.status, "grade": item.grade, "marked_by_id": actor.id}
            if row is not None:
                db.update_attendance(row, data)
            else:
                db.add_attendance({"user_id": item.student_id, "group_id": group.id, "date": day, **data})
        logger.info(
            "Attendance for group %s on %s: %d marks (%d overwritten)",
            group.id, day, len(items), len(existing),
        )
    return _batch_result(group, day, roster, items)


# --- Mutations ---

def create_attendance(db: DatabaseService, payload: AttendanceBatch, actor: Principal) -> AttendanceBatchResult:
    return _write_batch(db, payload.group_id, payload.date, payload.attendances, actor, overwrite=False)


def create_or_update_attendance(db: DatabaseService, payload: AttendanceBatch, actor: Principal) -> AttendanceBatchResult:
    return _write_batch(db, payload.group_id, payload.date, payload.attendances, actor, overwrite=True)


def bulk_update_attendance(db: DatabaseService, group_id: int, date_value: str,
                           items: List[AttendanceItem], actor: Principal) -> AttendanceBatchResult:
    return _write_batch(db, group_id, date_value, items, actor, overwrite=True)


def delete_attendance(db: DatabaseService, attendance_id: int, actor: Principal) -> MessageResponse:
    with db.transaction():
        attendance = db.get_attendance(attendance_id)
        if attendance is None:
            raise NotFoundError("Attendance not found")
        if attendance.group is None or attendance.group.teacher_id != actor.id:
            raise ForbiddenError("Only the teacher of this group can delete attendance")
        db.delete_attendance(attendance)
    return MessageResponse(message="Attendance deleted successfully")


def _teacher_attendance_read(row) -> TeacherAttendanceRead:
    return TeacherAttendanceRead(
        id=row.id,
        teacher_name=row.teacher.full_name if row.teacher else "N/A",
        group_name=row.group.name if row.group else None,
        date=row.date,
        status=row.status,
        marked_by=row.marked_by.full_name if row.marked_by else None,
    )


def mark_teacher_attendance(db: DatabaseService, payload: TeacherAttendanceCreate, actor: Principal) -> TeacherAttendanceRead:
    day = parse_date(payload.date)
    with db.transaction():
        group = _get_group(db, payload.group_id)
        if db.get_user_with_role(payload.teacher_id, RoleName.TEACHER.value) is None:
            raise NotFoundError("Teacher not found")
        if group.teacher_id != payload.teacher_id:
            raise BadRequestError("Teacher is not assigned to this group")

        data = {"status": payload.status, "marked_by_id": actor.id}
        row = db.get_teacher_attendance(payload.teacher_id, group.id, day)
        if row is not None:
            db.update_teacher_attendance(row, data)
        else:
            row = db.add_teacher_attendance({"teacher_id": payload.teacher_id, "group_id": group.id, "date": day, **data})
        logger.info("Teacher %s marked %s for group %s on %s", payload.teacher_id, payload.status, group.id, day)
    return _teacher_attendance_read(row)


# --- Reads ---

def list_teacher_attendances(db: DatabaseService, group_id: Optional[int] = None,
                             date_value: Optional[str] = None, teacher_id: Optional[int] = None) -> List[TeacherAttendanceRead]:
    day = parse_date(date_value) if date_value else None
    rows = db.get_teacher_attendances(group_id=group_id, day=day, teacher_id=teacher_id)
    return [_teacher_attendance_read(row) for row in rows]


def _lesson_end(group, day: datetime.date) -> datetime.datetime:
    tz = app_timezone()
    if not group.end_time:
        return datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time(), tzinfo=tz)
    end = datetime.datetime.combine(day, datetime.time.fromisoformat(group.end_time), tzinfo=tz)
    if group.start_time and group.end_time < group.start_time:
        # Runs past midnight.
        end += datetime.timedelta(days=1)
    return end


def groups_without_attendance(db: DatabaseService, date_value: Optional[str] = None,
                              now: Optional[datetime.datetime] = None) -> List[MissingAttendance]:
    """Active groups that met on the date, have finished, and still have no attendance."""
    now = now or now_local()
    day = parse_date(date_value) if date_value else now.date()
    weekday = weekday_name(day)

    missing = []
    for group in db.get_groups(status="active"):
        if weekday not in (group.days_of_week or []):
            continue
        if now < _lesson_end(group, day):
            continue
        if db.attendance_exists(group.id, day):
            continue
        missing.append(MissingAttendance(
            group_id=group.id,
            group_name=group.name,
            date=day,
            lesson_time=f"{group.start_time or '?'} - {group.end_time or '?'}",
            teacher=group.teacher.full_name if group.teacher else None,
            phone=group.teacher.phone if group.teacher else None,
        ))
    return missing


def list_attendances(db: DatabaseService, group_id: Optional[int] = None) -> List[AttendanceRead]:
    if group_id:
        _get_group(db, group_id)
    return [AttendanceRead.model_validate(row) for row in db.get_attendances(group_id)]


def get_attendance(db: DatabaseService, attendance_id: int) -> AttendanceRead:
    attendance = db.get_attendance(attendance_id)
    if attendance is None:
        raise NotFoundError("Attendance not found")
    return AttendanceRead.model_validate(attendance)


def daily_attendance(db: DatabaseService, group_id: int, date_value: Optional[str] = None,
                     student_name: Optional[str] = None) -> DailyAttendance:
    group = _get_group(db, group_id)
    day = parse_date(date_value) if date_value else today_local()
    rows = db.get_attendances_for_day(group.id, day, student_name)

    entries = [
        DailyAttendanceEntry(
            user_id=row.user_id,
            user_name=row.user.full_name,
            status=row.status,
            grade=row.grade,
            date=row.date,
        )
        for row in rows
    ]
    counts = {status: sum(1 for row in rows if row.status == status) for status in ATTENDANCE_STATUSES}
    return DailyAttendance(
        total_students=len(_roster(group)),
        present=counts["present"],
        absent=counts["absent"],
        late=counts["late"],
        attendances=entries,
    )


def attendance_statistics(db: DatabaseService, group_id: Optional[int] = None) -> List[StudentAttendanceStats]:
    """Per-student counters over all recorded marks, best attendance first."""
    rows = db.get_attendances(group_id)
    if not rows:
        return []

    users = {row.user_id: row.user for row in rows}
    df = pd.DataFrame([{"user_id": row.user_id, "status": row.status, "grade": row.grade} for row in rows])
    counts = pd.crosstab(df["user_id"], df["status"]).reindex(columns=list(ATTENDANCE_STATUSES), fill_value=0)
    df["grade"] = pd.to_numeric(df["grade"], errors="coerce")
    averages = df.groupby("user_id")["grade"].mean()
    counts = counts.sort_values("present", ascending=False, kind="stable")

    stats = []
    for user_id, row in counts.iterrows():
        average = averages.get(user_id)
        stats.append(StudentAttendanceStats(
            user=AttendanceUserBrief.model_validate(users[user_id]),
            present=int(row["present"]),
            absent=int(row["absent"]),
            late=int(row["late"]),
            total=int(row.sum()),
            average_grade=None if average is None or pd.isna(average) else round(float(average), 2),
        ))
    return stats


def attendance_history(db: DatabaseService, group_id: int, date_value: str, actor: Principal) -> AttendanceHistory:
    group = _get_group(db, group_id)
    roster = _roster(group)
    allowed = actor.is_staff or group.teacher_id == actor.id or (
        actor.role is RoleName.STUDENT and actor.id in roster
    )
    if not allowed:
        raise ForbiddenError("You do not have access to this group's attendance")

    day = parse_date(date_value)
    rows = db.get_attendances_for_day(group.id, day)
    statistics = HistoryStatistics(
        total_students=len(roster),
        present=sum(1 for row in rows if row.status == "present"),
        absent=sum(1 for row in rows if row.status == "absent"),
        late=sum(1 for row in rows if row.status == "late"),
    )
    students = [
        HistoryStudent(
            user_id=row.user_id,
            user_name=row.user.full_name,
            phone=row.user.phone,
            group_name=group.name,
            status=row.status,
            grade=row.grade,
        )
        for row in rows
    ]
    return AttendanceHistory(statistics=statistics, date=day, students=students)
