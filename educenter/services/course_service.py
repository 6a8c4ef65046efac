# /educenter/services/course_service.py

import datetime
import logging
from typing import Optional

from educenter.core.clock import today_local, to_local_date
from educenter.core.exceptions import ConflictError, NotFoundError
from educenter.models.common_model import MessageResponse
from educenter.models.course_model import (
    CourseCreate, CourseListResponse, CourseRead, CourseStats, CourseSummary, CourseUpdate,
)

from .compensation_service import refresh_teacher_salaries
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _get_course(db: DatabaseService, course_id: int):
    course = db.get_course_by_id(course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def create_course(db: DatabaseService, payload: CourseCreate) -> CourseRead:
    with db.transaction():
        if db.get_course_by_name(payload.name):
            raise ConflictError("Course with this name already exists")
        course = db.add_course({"name": payload.name, "description": payload.description})
        logger.info("Course %s created: %s", course.id, course.name)
    return CourseRead.model_validate(course)


def list_courses(db: DatabaseService, name: Optional[str] = None, today: Optional[datetime.date] = None) -> CourseListResponse:
    """Courses with their group and student counts plus the page statistics."""
    today = today or today_local()
    month_start = today.replace(day=1)
    courses = db.get_courses(name)

    summaries = []
    all_students = set()
    this_month_groups = 0
    for course in courses:
        students = {student.id for group in course.groups for student in group.students}
        all_students |= students
        this_month_groups += sum(
            1 for group in course.groups
            if to_local_date(group.created_at) is not None and to_local_date(group.created_at) >= month_start
        )
        summaries.append(CourseSummary(
            id=course.id,
            name=course.name,
            description=course.description,
            total_groups=len(course.groups),
            total_students=len(students),
        ))

    stats = CourseStats(
        total_courses=len(courses),
        total_students=len(all_students),
        this_month_groups=this_month_groups,
    )
    return CourseListResponse(stats=stats, data=summaries)


def get_course(db: DatabaseService, course_id: int) -> CourseRead:
    return CourseRead.model_validate(_get_course(db, course_id))


def update_course(db: DatabaseService, course_id: int, payload: CourseUpdate) -> CourseRead:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    with db.transaction():
        course = _get_course(db, course_id)
        if "name" in changes and changes["name"] != course.name and db.get_course_by_name(changes["name"]):
            raise ConflictError("Course with this name already exists")
        db.update_course(course, changes)
    return CourseRead.model_validate(course)


def delete_course(db: DatabaseService, course_id: int) -> MessageResponse:
    """Deletes a course with its groups and payments; teachers of those groups are re-paid."""
    with db.transaction():
        course = _get_course(db, course_id)
        teacher_ids = [group.teacher_id for group in course.groups]
        db.delete_course(course)
        refresh_teacher_salaries(db, teacher_ids)
        logger.info("Course %s deleted with %d groups", course_id, len(teacher_ids))
    return MessageResponse(message="Course deleted successfully")
