# /educenter/services/lesson_service.py

import datetime
import logging
from typing import List, Optional

from educenter.core.clock import now_local, parse_date, weekday_name
from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from educenter.core.permissions import Principal, RoleName
from educenter.models.attendance_model import AttendanceRead
from educenter.models.common_model import MessageResponse
from educenter.models.lesson_model import (
    LessonCreate, LessonRead, LessonStatistics, LessonUpdate, LessonWithAttendance,
)

from .database_service import DatabaseService

logger = logging.getLogger(__name__)

DEFAULT_LESSON_LENGTH = datetime.timedelta(hours=2)


def _get_group(db: DatabaseService, group_id: int):
    group = db.get_group_by_id(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


def _get_owned_lesson(db: DatabaseService, lesson_id: int, actor: Principal):
    lesson = db.get_lesson(lesson_id)
    if lesson is None:
        raise NotFoundError("Lesson not found")
    if lesson.group is None or lesson.group.teacher_id != actor.id:
        raise ForbiddenError("Only the teacher of this group can change its lessons")
    return lesson


def lesson_length(group) -> datetime.timedelta:
    """Scheduled length of one lesson of the group; two hours when unscheduled."""
    if not group.start_time or not group.end_time:
        return DEFAULT_LESSON_LENGTH
    start = datetime.datetime.combine(datetime.date.min, datetime.time.fromisoformat(group.start_time))
    end = datetime.datetime.combine(datetime.date.min, datetime.time.fromisoformat(group.end_time))
    if end <= start:
        end += datetime.timedelta(days=1)
    return end - start


def create_lesson(db: DatabaseService, payload: LessonCreate, actor: Principal,
                  now: Optional[datetime.datetime] = None) -> LessonRead:
    now = now or now_local()
    with db.transaction():
        group = db.get_group_for_update(payload.group_id)
        if group is None:
            raise NotFoundError("Group not found")
        if group.teacher_id != actor.id:
            raise ForbiddenError("Only the teacher of this group can create lessons")

        today = now.date()
        if weekday_name(today) not in (group.days_of_week or []):
            raise BadRequestError(f"Today ({weekday_name(today)}) is not a lesson day of this group")
        if db.get_lesson_by_day(group.id, today) is not None:
            raise ConflictError("A lesson has already been created for this group today")

        started = now.replace(tzinfo=None)
        lesson = db.add_lesson({
            "lesson_name": payload.lesson_name,
            "lesson_number": db.count_lessons(group.id) + 1,
            "lesson_date": started,
            "lesson_day": today,
            "end_date": started + lesson_length(group),
            "group_id": group.id,
        })
        logger.info("Lesson %s (#%s) created for group %s", lesson.id, lesson.lesson_number, group.id)
    return LessonRead.model_validate(lesson)


def list_lessons(db: DatabaseService) -> List[LessonRead]:
    return [LessonRead.model_validate(lesson) for lesson in db.get_lessons()]


def list_group_lessons(db: DatabaseService, group_id: int, actor: Principal,
                       date_value: Optional[str] = None) -> List[LessonRead]:
    group = _get_group(db, group_id)
    is_member = actor.role is RoleName.STUDENT and any(member.id == actor.id for member in group.students)
    if not (actor.is_staff or group.teacher_id == actor.id or is_member):
        raise ForbiddenError("You do not have access to this group's lessons")
    day = parse_date(date_value) if date_value else None
    return [LessonRead.model_validate(lesson) for lesson in db.get_lessons(group.id, day)]


def update_lesson(db: DatabaseService, lesson_id: int, payload: LessonUpdate, actor: Principal) -> LessonRead:
    with db.transaction():
        lesson = _get_owned_lesson(db, lesson_id, actor)
        db.update_lesson(lesson, payload.model_dump(exclude_unset=True, exclude_none=True))
    return LessonRead.model_validate(lesson)


def delete_lesson(db: DatabaseService, lesson_id: int, actor: Principal) -> MessageResponse:
    with db.transaction():
        lesson = _get_owned_lesson(db, lesson_id, actor)
        db.delete_lesson(lesson)
    return MessageResponse(message="Lesson deleted successfully")


def lesson_attendance_history(db: DatabaseService, lesson_id: int) -> LessonWithAttendance:
    lesson = db.get_lesson(lesson_id)
    if lesson is None:
        raise NotFoundError("Lesson not found")
    rows = db.get_attendances_for_day(lesson.group_id, lesson.lesson_day)
    result = LessonWithAttendance.model_validate(lesson)
    result.attendances = [AttendanceRead.model_validate(row) for row in rows]
    return result


def lesson_statistics(db: DatabaseService, group_id: Optional[int] = None,
                      date_value: Optional[str] = None) -> List[LessonStatistics]:
    """
    Attendance figures per lesson, read from the marks recorded for the
    lesson's group on the lesson's day.
    """
    day = parse_date(date_value) if date_value else None
    statistics = []
    for lesson in db.get_lessons(group_id, day):
        group = db.get_group_by_id(lesson.group_id)
        rows = db.get_attendances_for_day(lesson.group_id, lesson.lesson_day)
        present = sum(1 for row in rows if row.status == "present")
        rate = round(present / len(rows) * 100, 2) if rows else 0.0
        statistics.append(LessonStatistics(
            lesson=LessonRead.model_validate(lesson),
            teacher=group.teacher.full_name if group.teacher else None,
            course=group.course.name if group.course else None,
            total_students=sum(1 for member in group.students if member.role_name == RoleName.STUDENT.value),
            present_count=present,
            attendance_rate=rate,
        ))
    return statistics
