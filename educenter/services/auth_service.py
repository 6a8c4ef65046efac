# /educenter/services/auth_service.py

import logging

from educenter.core.exceptions import UnauthorizedError
from educenter.core.security import create_access_token, verify_password
from educenter.models.auth_model import LoginRequest, LoginResponse
from educenter.models.common_model import MessageResponse
from educenter.models.user_model import UserRead

from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def login(db: DatabaseService, payload: LoginRequest) -> LoginResponse:
    user = db.get_user_by_username(payload.username)
    # One message for every failure so the response does not reveal which part was wrong.
    if user is None or not user.password_hash or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for username %r", payload.username)
        raise UnauthorizedError("Invalid username or password")

    token = create_access_token(user.id, user.username, user.role_name)
    return LoginResponse(access_token=token, user=UserRead.model_validate(db.get_user_by_id(user.id)))


def logout() -> MessageResponse:
    # Tokens are stateless; the client drops its copy.
    return MessageResponse(message="Logged out successfully")
