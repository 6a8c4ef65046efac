# /educenter/services/application_service.py

"""
Application intake.

A lead that names a group or a course is converted on the spot: the phone
number is matched against existing students (or a new student is created),
the student is enrolled into the group, and the application is marked as
handled. Leads without either stay "new" until staff pick them up.
"""

import logging
from typing import Optional

from educenter.core.exceptions import ConflictError, NotFoundError
from educenter.core.permissions import RoleName
from educenter.models.application_model import (
    ApplicationCreate, ApplicationListItem, ApplicationListResponse, ApplicationRead,
    ApplicationStatistics, ApplicationUpdate,
)
from educenter.models.common_model import MessageResponse

from .database_service import DatabaseService
from .enrollment_service import enroll_student

logger = logging.getLogger(__name__)


def _get_application(db: DatabaseService, application_id: int):
    application = db.get_application(application_id)
    if application is None:
        raise NotFoundError("Application not found")
    return application


def _find_or_create_student(db: DatabaseService, first_name: str, last_name: str, phone: str, course_id: Optional[int]):
    user = db.get_user_by_phone(phone)
    if user is not None:
        if user.role_name != RoleName.STUDENT.value:
            raise ConflictError("This phone number belongs to a user who is not a student")
        if course_id and user.course_id != course_id:
            db.update_user(user, {"course_id": course_id})
        return user

    role = db.get_role_by_name(RoleName.STUDENT.value)
    if role is None:
        raise NotFoundError("Role not found")
    user = db.add_user({
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "role_id": role.id,
        "course_id": course_id,
    })
    logger.info("Student %s created from an application", user.id)
    return user


def _convert(db: DatabaseService, first_name: str, last_name: str, phone: str,
             group_id: Optional[int], course_id: Optional[int]) -> dict:
    """
    Turns a lead into an enrolled student inside the caller's transaction.
    Returns the application fields to store.
    """
    group = None
    if group_id:
        group = db.get_group_by_id(group_id)
        if group is None or group.status != "active":
            raise NotFoundError("Active group not found")
        course_id = course_id or group.course_id
    if course_id and db.get_course_by_id(course_id) is None:
        raise NotFoundError("Course not found")

    student = _find_or_create_student(db, first_name, last_name, phone, course_id)
    if group is not None and not any(member.id == student.id for member in group.students):
        enroll_student(db, group.id, student.id)
    return {"user_id": student.id, "group_id": group_id, "course_id": course_id, "status": True}


def create_application(db: DatabaseService, payload: ApplicationCreate) -> ApplicationRead:
    with db.transaction():
        record = {
            "first_name": payload.first_name,
            "last_name": payload.last_name,
            "phone": payload.phone,
            "status": False,
            "is_contacted": False,
        }
        if payload.group_id or payload.course_id:
            record.update(_convert(
                db, payload.first_name, payload.last_name, payload.phone, payload.group_id, payload.course_id,
            ))
        application = db.add_application(record)
        logger.info("Application %s received (converted=%s)", application.id, record["status"])
    return ApplicationRead.model_validate(application)


def list_applications(db: DatabaseService, first_name: Optional[str] = None, last_name: Optional[str] = None,
                      phone: Optional[str] = None) -> ApplicationListResponse:
    rows = db.get_applications(first_name=first_name, last_name=last_name, phone=phone)
    items = [
        ApplicationListItem(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            phone=row.phone,
            created_at=row.created_at,
            status=row.status,
            is_contacted=row.is_contacted,
            group=row.group.name if row.group else None,
        )
        for row in rows
    ]
    in_contact = sum(1 for row in rows if row.status)
    statistics = ApplicationStatistics(
        total_applications=len(rows),
        new_applications=len(rows) - in_contact,
        in_contact=in_contact,
    )
    return ApplicationListResponse(statistics=statistics, applications=items)


def get_application(db: DatabaseService, application_id: int) -> ApplicationRead:
    return ApplicationRead.model_validate(_get_application(db, application_id))


def update_application(db: DatabaseService, application_id: int, payload: ApplicationUpdate) -> ApplicationRead:
    with db.transaction():
        application = _get_application(db, application_id)
        db.update_application(application, payload.model_dump(exclude_unset=True, exclude_none=True))
    return ApplicationRead.model_validate(application)


def delete_application(db: DatabaseService, application_id: int) -> MessageResponse:
    with db.transaction():
        db.delete_application(_get_application(db, application_id))
    return MessageResponse(message="Application deleted successfully")


def assign_group(db: DatabaseService, application_id: int, group_id: int) -> ApplicationRead:
    with db.transaction():
        application = _get_application(db, application_id)
        data = _convert(
            db, application.first_name, application.last_name, application.phone, group_id, application.course_id,
        )
        db.update_application(application, data)
    return ApplicationRead.model_validate(application)


def remove_group(db: DatabaseService, application_id: int) -> ApplicationRead:
    """Detaches the group from the application; the student's enrollment is left as it is."""
    with db.transaction():
        application = _get_application(db, application_id)
        db.update_application(application, {"group_id": None})
    return ApplicationRead.model_validate(application)


def mark_contacted(db: DatabaseService, application_id: int) -> ApplicationRead:
    with db.transaction():
        application = _get_application(db, application_id)
        db.update_application(application, {"is_contacted": True, "status": True})
    return ApplicationRead.model_validate(application)
