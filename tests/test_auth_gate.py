import pytest
from sqlalchemy import select

import app.utils.slugify as slugify
from app.auth.routes import cookie_transport
from app.db import async_session
from app.middleware.auth_gate import LOGIN_PATH, is_elevated, is_protected
from app.models.tenant import Tenant
from app.models.user import User

COOKIE = cookie_transport.cookie_name


@pytest.mark.parametrize(
    "path, protected",
    [
        ("/admin", True),
        ("/admin/mama-put/menu-items", True),
        ("/settings", True),
        ("/settings/screenshots-upload", True),
        ("/administrator", False),
        ("/mama-put", False),
        ("/", False),
    ],
)
def test_protected_paths(path, protected):
    assert is_protected(path) is protected


@pytest.mark.parametrize(
    "path, elevated",
    [
        ("/settings", True),
        ("/settings/screenshots-upload", True),
        ("/admin/mama-put/settings", True),
        ("/admin/mama-put/settings/extra", True),
        ("/admin/mama-put/menu-items", False),
        ("/admin/settings-cafe", False),
    ],
)
def test_elevated_paths(path, elevated):
    assert is_elevated(path) is elevated


async def test_public_pages_need_no_session(client, make_owner):
    await make_owner()

    assert (await client.get("/health")).json() == {"status": "ok"}
    assert (await client.get("/mama-put")).status_code == 200
    assert (await client.get("/auth/login")).status_code == 200


async def test_anonymous_admin_request_goes_to_login(client, make_owner):
    await make_owner()

    response = await client.get("/admin/mama-put")

    assert response.status_code == 302
    assert response.headers["location"] == LOGIN_PATH
    assert "Mama Put" not in response.text

async def test_invalid_token_goes_to_login(client, make_owner):
    await make_owner()
    client.cookies.set(COOKIE, "not-a-jwt")

    response = await client.get("/admin/mama-put")

    assert response.status_code == 302
    assert response.headers["location"] == LOGIN_PATH


async def test_owner_reaches_dashboard_and_gets_fresh_cookie(client, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.get("/admin/mama-put")

    assert response.status_code == 200
    assert "Mama Put" in response.text
    set_cookie = response.headers.get("set-cookie", "")
    assert set_cookie.startswith(f"{COOKIE}=")
    assert "HttpOnly" in set_cookie


async def test_admin_root_redirects_to_own_restaurant(client, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.get("/admin")

    assert response.status_code == 302
    assert response.headers["location"] == "/admin/mama-put"


async def test_owner_cannot_open_another_restaurant(client, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await make_owner(email="bayo@example.com", restaurant="Suya Spot")
    await sign_in(client, user)

    response = await client.get("/admin/suya-spot")

    assert response.status_code == 403


async def test_unknown_restaurant_is_404_for_signed_in_user(client, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await sign_in(client, user)

    assert (await client.get("/admin/ghost-kitchen")).status_code == 404


@pytest.mark.parametrize("path", ["/settings", "/settings/screenshots-upload", "/admin/mama-put/settings"])
async def test_settings_need_privileged_account(client, make_owner, sign_in, settings, path):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.get(path)

    assert response.status_code == 302
    assert response.headers["location"] == LOGIN_PATH


async def test_privileged_account_opens_settings(client, make_owner, sign_in, settings, monkeypatch):
    user, _ = await make_owner()
    await make_owner(email="bayo@example.com", restaurant="Suya Spot")
    monkeypatch.setattr(settings, "privileged_user_id", str(user.id))
    await sign_in(client, user)

    assert (await client.get("/settings")).status_code == 200
    assert (await client.get("/admin/mama-put/settings")).status_code == 200
    # the privileged account may manage any restaurant
    assert (await client.get("/admin/suya-spot")).status_code == 200


async def test_register_then_login(client, settings):
    registered = await client.post(
        "/auth/register",
        data={
            "email": "chef@example.com",
            "password": "jollof-2026",
            "full_name": "Chef Tola",
            "restaurant_name": "Jollof House",
        },
    )
    assert registered.status_code == 303
    assert registered.headers["location"].startswith("/auth/login?success=")

    login = await client.post(
        "/auth/login", data={"email": "chef@example.com", "password": "jollof-2026"}
    )
    assert login.status_code == 303
    assert login.headers["location"] == "/admin/jollof-house"
    assert login.headers["set-cookie"].startswith(f"{COOKIE}=")

    dashboard = await client.get("/admin/jollof-house")
    assert dashboard.status_code == 200


async def test_register_rejects_duplicate_email_and_weak_password(client, make_owner):
    await make_owner()

    duplicate = await client.post(
        "/auth/register",
        data={"email": "owner@example.com", "password": "secret123", "restaurant_name": "Again"},
    )
    weak = await client.post(
        "/auth/register",
        data={"email": "new@example.com", "password": "abc", "restaurant_name": "Tiny"},
    )

    assert duplicate.status_code == 400
    assert "already exists" in duplicate.text
    assert weak.status_code == 400



async def test_register_slug_clash_leaves_no_account(client, make_owner, monkeypatch):
    await make_owner()

    async def never_taken(db, slug):
        return False

    monkeypatch.setattr(slugify, "slug_exists", never_taken)

    response = await client.post(
        "/auth/register",
        data={"email": "late@example.com", "password": "secret123", "restaurant_name": "Mama Put"},
    )

    assert response.status_code == 400
    assert "Please try again." in response.text
    async with async_session() as db:
        users = (await db.execute(select(User).where(User.email == "late@example.com"))).scalars().all()
        tenants = (await db.execute(select(Tenant))).scalars().all()
    assert users == []
    assert [t.slug for t in tenants] == ["mama-put"]

    monkeypatch.undo()
    retry = await client.post(
        "/auth/register",
        data={"email": "late@example.com", "password": "secret123", "restaurant_name": "Mama Put"},
    )
    assert retry.status_code == 303


async def test_login_with_wrong_password(client, make_owner):
    await make_owner()

    response = await client.post(
        "/auth/login", data={"email": "owner@example.com", "password": "wrong-one"}
    )

    assert response.status_code == 400
    assert "Invalid email or password." in response.text


async def test_logout_clears_cookie(client, make_owner, sign_in):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.get("/auth/logout")

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert f'{COOKIE}=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]
