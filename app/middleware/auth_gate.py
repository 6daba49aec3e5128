"""
Gate for the admin and platform-settings areas.

Protected paths need a session cookie that resolves to an active user;
elevated paths additionally need the privileged account. Everyone else is
sent to the login page. Authenticated requests get a re-issued cookie on the
way out so active sessions keep sliding forward.
"""
import logging
import re

from fastapi_users.db import SQLAlchemyUserDatabase
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.auth.dependencies import is_privileged
from app.auth.manager import UserManager
from app.auth.routes import cookie_transport, get_jwt_strategy, set_session_cookie
from app.models.user import User

log = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
PROTECTED_PREFIXES = ("/admin", "/settings")
ELEVATED_PATTERNS = (
    re.compile(r"^/settings(/|$)"),
    re.compile(r"^/admin/[^/]+/settings(/|$)"),
)


def is_protected(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


def is_elevated(path: str) -> bool:
    return any(pattern.match(path) for pattern in ELEVATED_PATTERNS)


class AuthGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, session_factory):
        super().__init__(app)
        self.session_factory = session_factory

    async def _load_user(self, request: Request):
        token = request.cookies.get(cookie_transport.cookie_name)
        if not token:
            return None
        async with self.session_factory() as db:
            manager = UserManager(SQLAlchemyUserDatabase(db, User))
            user = await get_jwt_strategy().read_token(token, manager)
        if user is None or not user.is_active:
            return None
        return user

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not is_protected(path):
            return await call_next(request)

        user = await self._load_user(request)
        if user is None:
            log.info("gate: unauthenticated request to %s", path)
            return RedirectResponse(url=LOGIN_PATH, status_code=302)

        if is_elevated(path) and not is_privileged(user):
            log.warning("gate: user %s denied elevated path %s", user.id, path)
            return RedirectResponse(url=LOGIN_PATH, status_code=302)

        request.state.user = user
        response = await call_next(request)

        token = await get_jwt_strategy().write_token(user)
        set_session_cookie(response, token)
        return response
