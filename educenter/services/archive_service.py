# /educenter/services/archive_service.py

"""
Archived users: frozen snapshots of people who left, restorable later.

Only a superAdmin may archive or restore a superAdmin.
"""

import logging
from typing import List, Optional

from educenter.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from educenter.core.permissions import Principal, RoleName
from educenter.models.archive_model import ArchiveCreate, ArchivedUserRead
from educenter.models.common_model import MessageResponse
from educenter.models.user_model import UserRead

from .compensation_service import refresh_teacher_salary
from .database_service import DatabaseService
from .user_service import ensure_unique_identity, get_user_or_404, remove_user

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "first_name", "last_name", "phone", "username", "password_hash",
    "address", "specialty", "salary", "percent", "course_id", "role_id",
)


def _guard_super_admin(role, actor: Principal) -> None:
    if role is not None and role.name == RoleName.SUPER_ADMIN.value and not actor.is_super_admin:
        raise ForbiddenError("Only a superAdmin can archive or restore a superAdmin")


def _get_snapshot(db: DatabaseService, archive_id: int):
    snapshot = db.get_archived_user(archive_id)
    if snapshot is None:
        raise NotFoundError("Archived user not found")
    return snapshot


def archive_user(db: DatabaseService, payload: ArchiveCreate, actor: Principal) -> ArchivedUserRead:
    with db.transaction():
        if payload.user_id:
            user = get_user_or_404(db, payload.user_id)
            _guard_super_admin(user.role, actor)
            record = {field: getattr(user, field) for field in SNAPSHOT_FIELDS}
            record["original_user_id"] = user.id
        else:
            if not (payload.first_name and payload.last_name and payload.phone and payload.role_id):
                raise BadRequestError("firstName, lastName, phone and roleId are required without userId")
            role = db.get_role_by_id(payload.role_id)
            if role is None:
                raise NotFoundError("Role not found")
            _guard_super_admin(role, actor)
            record = payload.model_dump(exclude={"user_id", "remove_user"})
            user = None

        snapshot = db.add_archived_user(record)
        if user is not None and payload.remove_user:
            remove_user(db, user)
        logger.info("User snapshot %s archived (original user %s)", snapshot.id, record.get("original_user_id"))
    return ArchivedUserRead.model_validate(snapshot)


def list_archived_users(db: DatabaseService, first_name: Optional[str] = None, last_name: Optional[str] = None,
                        phone: Optional[str] = None, role_id: Optional[int] = None) -> List[ArchivedUserRead]:
    rows = db.get_archived_users(first_name=first_name, last_name=last_name, phone=phone, role_id=role_id)
    return [ArchivedUserRead.model_validate(row) for row in rows]


def get_archived_user(db: DatabaseService, archive_id: int) -> ArchivedUserRead:
    return ArchivedUserRead.model_validate(_get_snapshot(db, archive_id))


def restore_user(db: DatabaseService, archive_id: int, actor: Principal) -> UserRead:
    """Recreates the live user from a snapshot and drops the snapshot."""
    with db.transaction():
        snapshot = _get_snapshot(db, archive_id)
        _guard_super_admin(snapshot.role, actor)
        ensure_unique_identity(db, snapshot.phone, snapshot.username)
        role_name = snapshot.role.name

        record = {field: getattr(snapshot, field) for field in SNAPSHOT_FIELDS}
        if record["course_id"] and db.get_course_by_id(record["course_id"]) is None:
            record["course_id"] = None
        user = db.add_user(record)
        db.delete_archived_user(snapshot)
        if role_name == RoleName.TEACHER.value:
            refresh_teacher_salary(db, user.id)
        logger.info("Archived user %s restored as user %s", archive_id, user.id)

    db.refresh(user)
    return UserRead.model_validate(user)


def delete_archived_user(db: DatabaseService, archive_id: int, actor: Principal) -> MessageResponse:
    with db.transaction():
        snapshot = _get_snapshot(db, archive_id)
        _guard_super_admin(snapshot.role, actor)
        db.delete_archived_user(snapshot)
    return MessageResponse(message="Archived user deleted successfully")
