# /educenter/core/permissions.py

"""
The closed set of roles known to the system and the capability check that
every protected route goes through.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class RoleName(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPER_ADMIN = "superAdmin"


STAFF_ROLES = (RoleName.ADMIN, RoleName.SUPER_ADMIN)


def parse_role(value: Optional[str]) -> Optional[RoleName]:
    """Maps a stored role name onto the enum, or None for unknown names."""
    try:
        return RoleName(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as decoded from the bearer token."""
    id: int
    username: Optional[str]
    role: Optional[RoleName]

    @property
    def is_super_admin(self) -> bool:
        return self.role is RoleName.SUPER_ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def has_role(principal: Principal, allowed: Iterable[RoleName]) -> bool:
    return principal.role is not None and principal.role in set(allowed)
