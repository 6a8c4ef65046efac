# /educenter/services/group_service.py

"""
Business logic for groups: creation, updates, status changes, deletion and
the read views the front-end builds its group pages from.
"""

import datetime
import logging
from typing import List, Optional

from educenter.core.clock import month_end, today_local, to_local_date, weekday_name
from educenter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from educenter.core.permissions import RoleName
from educenter.db.models.catalog_models import GROUP_STATUSES
from educenter.models.common_model import SalaryChange
from educenter.models.group_model import (
    GroupCreate, GroupListItem, GroupListResponse, GroupListStatistics, GroupRead,
    GroupUpdate, ScheduleAttendance, ScheduleStudent, TeacherGroupItem,
    TeacherGroupsResponse, TeacherGroupStats, TeacherSchedule,
)

from .compensation_service import refresh_teacher_salaries, refresh_teacher_salary
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

# Uzbek day names shown on the teacher's group overview.
DAY_TRANSLATIONS = {
    "Monday": "Dushanba",
    "Tuesday": "Seshanba",
    "Wednesday": "Chorshanba",
    "Thursday": "Payshanba",
    "Friday": "Juma",
    "Saturday": "Shanba",
    "Sunday": "Yakshanba",
}


def _full_name(user) -> str:
    return f"{user.first_name} {user.last_name}"


def _student_members(group) -> list:
    return [member for member in group.students if member.role_name == RoleName.STUDENT.value]


def _get_group(db: DatabaseService, group_id: int):
    group = db.get_group_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


def _get_teacher(db: DatabaseService, teacher_id: int):
    teacher = db.get_user_with_role(teacher_id, RoleName.TEACHER.value)
    if teacher is None:
        raise NotFoundError("Teacher not found")
    return teacher


def _get_students(db: DatabaseService, user_ids: List[int]) -> list:
    unique_ids = list(dict.fromkeys(user_ids))
    students = db.get_users_with_role(unique_ids, RoleName.STUDENT.value)
    if len(students) != len(unique_ids):
        raise NotFoundError("One or more students not found")
    return students


# --- Mutations ---

def create_group(db: DatabaseService, payload: GroupCreate) -> GroupRead:
    with db.transaction():
        course = db.get_course_by_id(payload.course_id)
        if course is None:
            raise NotFoundError("Course not found")
        teacher = _get_teacher(db, payload.teacher_id) if payload.teacher_id else None
        students = _get_students(db, payload.user_ids) if payload.user_ids else []
        if db.get_group_by_name_and_course(payload.name, payload.course_id):
            raise ConflictError("Group with the same name already exists for this course")

        group = db.add_group({
            "name": payload.name,
            "course_id": course.id,
            "teacher_id": teacher.id if teacher else None,
            "price": payload.price,
            "start_time": payload.start_time,
            "end_time": payload.end_time,
            "days_of_week": list(payload.days_of_week),
            "status": "active",
        })
        if students:
            db.replace_roster(group, students)
        logger.info("Group %s created in course %s", group.id, course.id)
        salary = refresh_teacher_salary(db, group.teacher_id)

    return GroupRead.from_group(group, salary)


def update_group(db: DatabaseService, group_id: int, payload: GroupUpdate) -> GroupRead:
    changes = payload.model_dump(exclude_unset=True)
    with db.transaction():
        group = db.get_group_for_update(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        old_teacher_id = group.teacher_id

        data = {}
        for key in ("name", "price", "start_time", "end_time", "status"):
            if changes.get(key) is not None:
                data[key] = changes[key]
        if changes.get("days_of_week") is not None:
            data["days_of_week"] = list(changes["days_of_week"])
        if changes.get("course_id"):
            course = db.get_course_by_id(changes["course_id"])
            if course is None:
                raise NotFoundError("Course not found")
            data["course_id"] = course.id
        if changes.get("teacher_id"):
            data["teacher_id"] = _get_teacher(db, changes["teacher_id"]).id

        new_name = data.get("name", group.name)
        new_course_id = data.get("course_id", group.course_id)
        clash = db.get_group_by_name_and_course(new_name, new_course_id)
        if clash is not None and clash.id != group.id:
            raise ConflictError("Group with the same name already exists for this course")

        db.update_group(group, data)
        if "user_ids" in changes and changes["user_ids"] is not None:
            db.replace_roster(group, _get_students(db, changes["user_ids"]))

        salaries = refresh_teacher_salaries(db, [group.teacher_id, old_teacher_id])

    return GroupRead.from_group(group, salaries.get(group.teacher_id))


def update_status(db: DatabaseService, group_id: int, status: str) -> GroupRead:
    if status not in GROUP_STATUSES:
        raise BadRequestError("Invalid status. Must be one of: active, completed, planned")
    with db.transaction():
        group = db.get_group_for_update(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        db.update_group(group, {"status": status})
        logger.info("Group %s status set to %s", group_id, status)
        salary = refresh_teacher_salary(db, group.teacher_id)
    return GroupRead.from_group(group, salary)


def delete_group(db: DatabaseService, group_id: int) -> SalaryChange:
    with db.transaction():
        group = db.get_group_for_update(group_id)
        if group is None:
            raise NotFoundError(f"Group with id {group_id} does not exist")
        teacher_id = group.teacher_id
        db.delete_group(group)
        salary = refresh_teacher_salary(db, teacher_id)
    return SalaryChange(message=f"Group with id {group_id} has been successfully deleted", teacher_salary=salary)


# --- Reads ---

def get_group(db: DatabaseService, group_id: int) -> GroupRead:
    return GroupRead.from_group(_get_group(db, group_id))


def list_groups(db: DatabaseService, search: Optional[str] = None, today: Optional[datetime.date] = None) -> GroupListResponse:
    """Active groups with the list-page statistics block."""
    today = today or today_local()
    month_start = today.replace(day=1)
    groups = db.get_groups(status="active", name=search)

    items = []
    total_students = 0
    this_month = 0
    for group in groups:
        count = len(_student_members(group))
        total_students += count
        created = to_local_date(group.created_at)
        if created is not None and created >= month_start:
            this_month += 1
        items.append(GroupListItem(
            id=group.id,
            name=group.name,
            teacher=_full_name(group.teacher) if group.teacher else "N/A",
            course=group.course.name if group.course else "N/A",
            student_count=count,
            status=group.status,
            price=group.price,
            data=f"{group.start_time or ''} {group.end_time or ''}".strip(),
            data_days=group.days_of_week or [],
        ))

    statistics = GroupListStatistics(
        total_groups=len(groups),
        total_students=total_students,
        active_courses=len({group.course_id for group in groups}),
        total_groups_this_month=this_month,
    )
    return GroupListResponse(statistics=statistics, groups=items)


def search_groups(db: DatabaseService, name: Optional[str] = None, teacher_name: Optional[str] = None) -> List[GroupRead]:
    groups = db.get_groups(status="active", name=name, teacher_name=teacher_name)
    return [GroupRead.from_group(group) for group in groups]


def get_groups_by_course(db: DatabaseService, course_id: int) -> List[GroupRead]:
    return [GroupRead.from_group(group) for group in db.get_groups(status="active", course_id=course_id)]


def get_groups_of_student(db: DatabaseService, username: str) -> List[GroupRead]:
    return [GroupRead.from_group(group) for group in db.get_groups_of_student(username)]


def get_active_group_students(db: DatabaseService, group_id: int) -> list:
    group = db.get_group_by_id(group_id)
    if group is None or group.status != "active":
        raise NotFoundError("Active group not found")
    return _student_members(group)


def get_group_students(db: DatabaseService, group_id: int) -> list:
    return _student_members(_get_group(db, group_id))


def get_teacher_groups(db: DatabaseService, teacher_id: int, today: Optional[datetime.date] = None) -> TeacherGroupsResponse:
    today = today or today_local()
    groups = db.get_groups(status="active", teacher_id=teacher_id)
    if not groups:
        raise NotFoundError("No groups found for this teacher")

    last_week = today - datetime.timedelta(days=7)
    new_last_week = sum(
        1 for group in groups
        if to_local_date(group.created_at) is not None and to_local_date(group.created_at) >= last_week
    )
    stats = TeacherGroupStats(
        total_groups=len(groups),
        new_groups_last_week=new_last_week,
        active_groups=len(groups),
        total_students=sum(len(group.students) for group in groups),
    )
    items = [
        TeacherGroupItem(
            id=group.id,
            name=group.name,
            student_count=len(group.students),
            days_of_week=", ".join(DAY_TRANSLATIONS.get(day, day) for day in group.days_of_week) if group.days_of_week else "N/A",
            time=f"{group.start_time} - {group.end_time}" if group.start_time and group.end_time else "N/A",
            course=group.course.name if group.course else "N/A",
        )
        for group in groups
    ]
    return TeacherGroupsResponse(stats=stats, groups=items)


def lesson_dates_in_month(group, year: int, month: int) -> List[int]:
    """
    Days of the month on which the group meets. A lesson ending at midnight
    ("00:xx") on the last day of the month belongs to the next month and is
    left out.
    """
    last_day = month_end(year, month).day
    days = []
    for day in range(1, last_day + 1):
        if weekday_name(datetime.date(year, month, day)) not in (group.days_of_week or []):
            continue
        if day == last_day and group.end_time and group.end_time.startswith("00:"):
            continue
        days.append(day)
    return days


def get_teacher_schedule(
    db: DatabaseService,
    teacher_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[datetime.date] = None,
) -> List[TeacherSchedule]:
    today = today or today_local()
    year = year or today.year
    month = month or today.month
    if not 1 <= month <= 12:
        raise BadRequestError("month must be between 1 and 12")

    groups = db.get_groups(status="active", teacher_id=teacher_id)
    if not groups:
        raise NotFoundError("No groups found for this teacher")

    start, end = datetime.date(year, month, 1), month_end(year, month)
    schedules = []
    for group in groups:
        attendances = db.get_attendances_between(group.id, start, end)
        students = [
            ScheduleStudent(
                id=member.id,
                first_name=member.first_name,
                last_name=member.last_name,
                attendances=[
                    ScheduleAttendance(date=row.date.isoformat(), status=row.status, grade=row.grade)
                    for row in attendances if row.user_id == member.id
                ],
            )
            for member in _student_members(group)
        ]
        dates = lesson_dates_in_month(group, year, month)
        created = to_local_date(group.created_at)
        schedules.append(TeacherSchedule(
            id=group.id,
            name=group.name,
            teacher=_full_name(group.teacher) if group.teacher else "N/A",
            course=group.course.name if group.course else "N/A",
            start_time=group.start_time or "N/A",
            end_time=group.end_time or "N/A",
            days_of_week=", ".join(group.days_of_week) if group.days_of_week else "N/A",
            created_at=created.isoformat() if created else "",
            price=group.price,
            total_lessons=len(dates),
            lesson_dates=dates,
            students=students,
        ))
    return schedules
