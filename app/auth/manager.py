import logging
import uuid
from typing import Optional, Union

from fastapi import Request
from fastapi_users import BaseUserManager, InvalidPasswordException, UUIDIDMixin

from app.core.config import get_settings
from app.models.user import User
from app.schemas.user import UserCreate

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = get_settings().auth_secret
    verification_token_secret = get_settings().auth_secret

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if user.email and user.email.lower() in password.lower():
            raise InvalidPasswordException(reason="Password should not contain e-mail")

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        log.info("user registered: id=%s email=%s", user.id, user.email)

    async def on_after_login(self, user: User, request: Optional[Request] = None, response=None):
        log.info("user logged in: id=%s", user.id)
