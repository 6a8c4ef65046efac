# /educenter/core/deps.py

"""
FastAPI dependencies for authentication and role gating.

`get_current_principal` turns the bearer token into a `Principal`.
`require_roles(...)` builds a dependency that additionally checks the caller's
role against the set a route allows.
"""

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .permissions import Principal, RoleName, has_role, parse_role
from .security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_access_token(credentials.credentials)
    if not claims or claims.get("id") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Principal(
        id=int(claims["id"]),
        username=claims.get("username"),
        role=parse_role(claims.get("role")),
    )


def require_roles(*allowed: RoleName) -> Callable[..., Principal]:
    """Dependency factory: authenticated caller whose role is in `allowed`."""

    def _guard(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_role(principal, allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return principal

    return _guard


# Shorthands for the role sets used across the routers.
staff_only = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN)
staff_or_teacher = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN, RoleName.TEACHER)
teacher_only = require_roles(RoleName.TEACHER)
any_role = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN, RoleName.TEACHER, RoleName.STUDENT)
