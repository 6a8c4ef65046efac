# /educenter/models/auth_model.py

from pydantic import Field

from .common_model import CamelModel
from .user_model import UserRead


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    access_token: str
    user: UserRead
