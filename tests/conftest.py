import os
import tempfile

# The app reads DATABASE_URL at import time
_DB_DIR = tempfile.mkdtemp(prefix="snackbite-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"

import pytest
from fastapi_users.db import SQLAlchemyUserDatabase
from httpx import ASGITransport, AsyncClient

from app.auth.manager import UserManager
from app.auth.routes import cookie_transport, get_jwt_strategy
from app.core.config import get_settings
from app.db import async_session, create_db_and_tables, drop_db_and_tables, engine
from app.main import app
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.accounts import register_owner


@pytest.fixture(autouse=True)
async def db_tables():
    await create_db_and_tables()
    app.state.data.cache.clear()
    yield
    await app.state.data.cache.wait_idle()
    app.state.data.cache.clear()
    app.dependency_overrides.clear()
    await drop_db_and_tables()
    await engine.dispose()


@pytest.fixture
def settings(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "privileged_user_id", None)
    return settings


@pytest.fixture
def data():
    return app.state.data


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def make_owner():
    """Register an account with its restaurant; returns (user, tenant)."""

    async def _make(
        email: str = "owner@example.com",
        password: str = "secret123",
        restaurant: str = "Mama Put",
        full_name: str = "Ada Obi",
    ):
        async with async_session() as db:
            manager = UserManager(SQLAlchemyUserDatabase(db, User))
            return await register_owner(
                db,
                manager,
                UserCreate(email=email, password=password),
                restaurant_name=restaurant,
                full_name=full_name,
            )

    return _make


@pytest.fixture
def sign_in():
    """Put a valid auth cookie for ``user`` on the client."""

    async def _sign_in(client: AsyncClient, user):
        token = await get_jwt_strategy().write_token(user)
        client.cookies.set(cookie_transport.cookie_name, token)

    return _sign_in
