# /educenter/services/enrollment_service.py

"""
Group membership changes: add, restore, remove and transfer.

Each call runs in one transaction. The group row is locked while its roster
changes, and the salary of every affected teacher is recomputed and written
before the transaction commits, so a stored salary never reflects a stale
roster.
"""

import logging

from educenter.core.exceptions import BadRequestError, ConflictError, NotFoundError
from educenter.core.permissions import RoleName
from educenter.models.common_model import SalaryChange
from educenter.models.group_model import GroupRead, TransferResult

from .compensation_service import refresh_teacher_salaries, refresh_teacher_salary
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _get_student(db: DatabaseService, user_id: int):
    student = db.get_user_with_role(user_id, RoleName.STUDENT.value)
    if student is None:
        raise NotFoundError("Student not found")
    return student


def _is_enrolled(group, user_id: int) -> bool:
    return any(member.id == user_id for member in group.students)


def enroll_student(db: DatabaseService, group_id: int, user_id: int):
    """
    Adds a student to an active group inside the caller's transaction and
    refreshes the group teacher's salary. Returns (group, teacher salary).
    """
    group = db.get_group_for_update(group_id)
    if group is None or group.status != "active":
        raise NotFoundError("Active group not found")
    student = _get_student(db, user_id)
    if _is_enrolled(group, user_id):
        raise ConflictError("Student already in group")

    db.add_student_to_group(group, student)
    logger.info("Student %s enrolled in group %s", user_id, group_id)
    return group, refresh_teacher_salary(db, group.teacher_id)


def add_student(db: DatabaseService, group_id: int, user_id: int) -> GroupRead:
    with db.transaction():
        group, salary = enroll_student(db, group_id, user_id)
    return GroupRead.from_group(group, salary)


def restore_student(db: DatabaseService, group_id: int, user_id: int) -> GroupRead:
    """Re-enrolls a previously removed student; same rules as `add_student`."""
    return add_student(db, group_id, user_id)


def remove_student(db: DatabaseService, group_id: int, user_id: int) -> SalaryChange:
    with db.transaction():
        group = db.get_group_for_update(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        student = next((member for member in group.students if member.id == user_id), None)
        if student is None or student.role_name != RoleName.STUDENT.value:
            raise NotFoundError("Student not found in this group")

        db.remove_student_from_group(group, student)
        logger.info("Student %s removed from group %s", user_id, group_id)
        salary = refresh_teacher_salary(db, group.teacher_id)

    return SalaryChange(message="Student removed from group successfully", teacher_salary=salary)


def transfer_student(db: DatabaseService, from_group_id: int, to_group_id: int, user_id: int) -> TransferResult:
    if from_group_id == to_group_id:
        raise BadRequestError("Source and target groups are the same")

    with db.transaction():
        # Lock both rows in id order so two opposite transfers cannot deadlock.
        locked = {gid: db.get_group_for_update(gid) for gid in sorted((from_group_id, to_group_id))}
        source, target = locked[from_group_id], locked[to_group_id]
        if source is None or target is None:
            raise NotFoundError("Group not found")
        student = _get_student(db, user_id)
        if not _is_enrolled(source, user_id):
            raise BadRequestError("Student not found in source group")
        if _is_enrolled(target, user_id):
            raise BadRequestError("Student already in target group")

        db.remove_student_from_group(source, student)
        db.add_student_to_group(target, student)
        logger.info("Student %s transferred from group %s to group %s", user_id, from_group_id, to_group_id)

        salaries = refresh_teacher_salaries(db, [source.teacher_id, target.teacher_id])

    return TransferResult(
        from_group=GroupRead.from_group(source),
        to_group=GroupRead.from_group(target),
        from_teacher_salary=salaries.get(source.teacher_id),
        to_teacher_salary=salaries.get(target.teacher_id),
    )
