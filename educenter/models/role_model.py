# /educenter/models/role_model.py

from pydantic import Field

from .common_model import CamelModel


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=1, description="One of: student, teacher, admin, superAdmin.")


class RoleRead(CamelModel):
    id: int
    name: str
