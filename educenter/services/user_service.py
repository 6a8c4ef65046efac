# /educenter/services/user_service.py

"""
Business logic for users of every role: creation, profile updates, deletion
and the user-centric read views (admins, students, workers, the per-month
payment view of all students).
"""

import datetime
import logging
from typing import List, Optional

from educenter.core.clock import month_key, parse_month_for, today_local
from educenter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from educenter.core.permissions import RoleName, parse_role
from educenter.core.security import get_password_hash
from educenter.models.common_model import MessageResponse
from educenter.models.user_model import (
    StudentBrief, StudentGroupView, StudentMonthPayment, StudentPaymentView, UserCreate,
    UserRead, UserUpdate, WorkerRead,
)

from .compensation_service import refresh_teacher_salaries, refresh_teacher_salary
from .database_service import DatabaseService
from .enrollment_service import enroll_student

logger = logging.getLogger(__name__)


def get_user_or_404(db: DatabaseService, user_id: int):
    user = db.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _get_role(db: DatabaseService, name: str):
    if parse_role(name) is None:
        raise BadRequestError("Invalid role. Must be one of: student, teacher, admin, superAdmin")
    role = db.get_role_by_name(name)
    if role is None:
        raise NotFoundError("Role not found")
    return role


def ensure_unique_identity(db: DatabaseService, phone: Optional[str], username: Optional[str],
                           exclude_user_id: Optional[int] = None) -> None:
    """Raises Conflict when another user already holds the phone or username."""
    if phone:
        holder = db.get_user_by_phone(phone)
        if holder is not None and holder.id != exclude_user_id:
            raise ConflictError("A user with this phone number already exists")
    if username:
        holder = db.get_user_by_username(username)
        if holder is not None and holder.id != exclude_user_id:
            raise ConflictError("Username already exists")


# --- Mutations ---

def create_user(db: DatabaseService, payload: UserCreate) -> UserRead:
    role_name = payload.role or RoleName.STUDENT.value
    is_student = role_name == RoleName.STUDENT.value

    with db.transaction():
        role = _get_role(db, role_name)
        ensure_unique_identity(db, payload.phone, payload.username)
        if role_name == RoleName.TEACHER.value and payload.percent is None:
            raise BadRequestError("Percent is required for teachers")
        if is_student and payload.course_id and db.get_course_by_id(payload.course_id) is None:
            raise NotFoundError("Course not found")
        if is_student and payload.group_id and db.get_group_by_id(payload.group_id) is None:
            raise NotFoundError("Group not found")

        user = db.add_user({
            "first_name": payload.first_name,
            "last_name": payload.last_name,
            "phone": payload.phone,
            "username": payload.username,
            "password_hash": get_password_hash(payload.password) if payload.password else None,
            "address": payload.address,
            "specialty": payload.specialty,
            "percent": payload.percent,
            "role_id": role.id,
            "course_id": payload.course_id if is_student else None,
        })
        logger.info("User %s created with role %s", user.id, role_name)

        if is_student and payload.group_id:
            enroll_student(db, payload.group_id, user.id)
        elif role_name == RoleName.TEACHER.value:
            refresh_teacher_salary(db, user.id)

    db.refresh(user)
    return UserRead.model_validate(user)


def update_user(db: DatabaseService, user_id: int, payload: UserUpdate, allow_role_change: bool = True) -> UserRead:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not allow_role_change:
        changes.pop("role", None)

    with db.transaction():
        user = get_user_or_404(db, user_id)
        ensure_unique_identity(db, changes.get("phone"), changes.get("username"), exclude_user_id=user.id)

        if "role" in changes:
            changes["role_id"] = _get_role(db, changes.pop("role")).id
        if "password" in changes:
            changes["password_hash"] = get_password_hash(changes.pop("password"))

        db.update_user(user, changes)
        db.refresh(user)
        if user.role_name == RoleName.TEACHER.value and user.percent is None:
            raise BadRequestError("Percent is required for teachers")
        if user.role_name == RoleName.TEACHER.value and ("percent" in changes or "role_id" in changes):
            refresh_teacher_salary(db, user.id)

    return UserRead.model_validate(user)


def update_me(db: DatabaseService, user_id: int, payload: UserUpdate) -> UserRead:
    """Self-service profile edit; a role in the payload is ignored."""
    return update_user(db, user_id, payload, allow_role_change=False)


def remove_user(db: DatabaseService, user) -> None:
    """
    Deletes a user inside the caller's transaction. Removing a student
    shrinks the rosters of their groups, so those groups' teachers are
    re-paid before the transaction ends.
    """
    teacher_ids = db.get_teacher_ids_of_student(user.id) if user.role_name == RoleName.STUDENT.value else []
    db.delete_user(user)
    refresh_teacher_salaries(db, teacher_ids)
    logger.info("User %s deleted; %d teacher salaries refreshed", user.id, len(teacher_ids))


def delete_user(db: DatabaseService, user_id: int) -> MessageResponse:
    with db.transaction():
        remove_user(db, get_user_or_404(db, user_id))
    return MessageResponse(message="User deleted successfully")


# --- Reads ---

def get_user(db: DatabaseService, user_id: int) -> UserRead:
    return UserRead.model_validate(get_user_or_404(db, user_id))


def list_users(db: DatabaseService, role: Optional[str] = None, first_name: Optional[str] = None,
               last_name: Optional[str] = None, phone: Optional[str] = None) -> List[UserRead]:
    users = db.get_users(role_name=role, first_name=first_name, last_name=last_name, phone=phone)
    return [UserRead.model_validate(user) for user in users]


def list_admins(db: DatabaseService) -> List[UserRead]:
    return [UserRead.model_validate(user) for user in db.get_users(role_name=RoleName.ADMIN.value)]


def list_students(db: DatabaseService, user_id: Optional[int] = None, first_name: Optional[str] = None,
                  last_name: Optional[str] = None) -> List[StudentBrief]:
    students = db.get_users(
        role_name=RoleName.STUDENT.value, user_id=user_id, first_name=first_name, last_name=last_name,
    )
    return [StudentBrief(id=s.id, full_name=s.full_name, phone=s.phone) for s in students]


def _student_group_view(group) -> StudentGroupView:
    return StudentGroupView(
        id=group.id,
        name=group.name,
        teacher=group.teacher.full_name if group.teacher else None,
        course=group.course.name if group.course else None,
        student_count=len(group.students),
        status=group.status,
        price=group.price,
        data=f"{group.start_time or ''} {group.end_time or ''}".strip() or None,
        data_days=group.days_of_week or [],
    )


def students_payment_view(
    db: DatabaseService,
    group_id: Optional[int] = None,
    paid: Optional[bool] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
    address: Optional[str] = None,
    month_for: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> List[StudentPaymentView]:
    """
    Every student with their groups and, per group, the payments of the
    billing month (an unpaid placeholder when nothing was paid). A student
    counts as paid when every one of their groups is paid for the month.
    """
    if month_for:
        parse_month_for(month_for)
    else:
        today = today or today_local()
        month_for = month_key(today.year, today.month)

    students = db.get_users(
        role_name=RoleName.STUDENT.value, first_name=first_name, last_name=last_name,
        phone=phone, address=address,
    )
    month_payments = db.get_payments(month_for=month_for)

    views = []
    for student in students:
        groups = [g for g in student.groups if not group_id or g.id == group_id]
        if group_id and not groups:
            continue

        payments = []
        all_paid = bool(groups)
        for group in groups:
            rows = [p for p in month_payments if p.user_id == student.id and p.group_id == group.id]
            if rows:
                payments.extend(StudentMonthPayment.model_validate(p) for p in rows)
            else:
                payments.append(StudentMonthPayment(amount=0, month_for=month_for, paid=False, group_id=group.id))
            all_paid = all_paid and any(p.paid for p in rows)

        if paid is not None and paid != all_paid:
            continue
        views.append(StudentPaymentView(
            id=student.id,
            full_name=student.full_name,
            phone=student.phone,
            address=student.address,
            groups=[_student_group_view(g) for g in groups],
            payments=payments,
        ))
    return views


def list_workers(db: DatabaseService) -> List[WorkerRead]:
    workers = []
    for user in db.get_users_excluding_roles([RoleName.STUDENT.value]):
        is_teacher = user.role_name == RoleName.TEACHER.value
        taught = user.groups_as_teacher if is_teacher else []
        workers.append(WorkerRead(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            phone=user.phone,
            address=user.address,
            specialty=user.specialty,
            salary=user.salary,
            role=user.role_name,
            groups=[g.name for g in taught],
            courses=sorted({g.course.name for g in taught if g.course}) if is_teacher else None,
        ))
    return workers
