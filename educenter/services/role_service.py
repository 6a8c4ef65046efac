# /educenter/services/role_service.py

import logging
from typing import List

from educenter.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from educenter.core.permissions import Principal, RoleName, parse_role
from educenter.models.common_model import MessageResponse
from educenter.models.role_model import RoleCreate, RoleRead

from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _guard_super_admin_role(name: str, actor: Principal) -> None:
    if name == RoleName.SUPER_ADMIN.value and not actor.is_super_admin:
        raise ForbiddenError("Only a superAdmin can manage the superAdmin role")


def ensure_default_roles(db: DatabaseService) -> None:
    """Creates any of the four built-in roles that do not exist yet."""
    with db.transaction():
        for role in RoleName:
            if db.get_role_by_name(role.value) is None:
                db.add_role(role.value)
                logger.info("Seeded role %s", role.value)


def create_role(db: DatabaseService, payload: RoleCreate, actor: Principal) -> RoleRead:
    if parse_role(payload.name) is None:
        raise BadRequestError("Invalid role. Must be one of: student, teacher, admin, superAdmin")
    _guard_super_admin_role(payload.name, actor)
    with db.transaction():
        if db.get_role_by_name(payload.name) is not None:
            raise ConflictError("Role already exists")
        role = db.add_role(payload.name)
    return RoleRead.model_validate(role)


def list_roles(db: DatabaseService) -> List[RoleRead]:
    return [RoleRead.model_validate(role) for role in db.get_all_roles()]


def delete_role(db: DatabaseService, role_id: int, actor: Principal) -> MessageResponse:
    with db.transaction():
        role = db.get_role_by_id(role_id)
        if role is None:
            raise NotFoundError("Role not found")
        _guard_super_admin_role(role.name, actor)
        if db.count_users_with_role(role.id):
            raise ConflictError("Role is still assigned to users")
        db.delete_role(role)
        logger.info("Role %s deleted by user %s", role.name, actor.id)
    return MessageResponse(message="Role deleted successfully")
