import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import exceptions
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pages import notices, redirect_with, templates
from app.auth.routes import clear_session_cookie, get_jwt_strategy, get_user_manager, set_session_cookie
from app.core.errors import StorageNotConfigured
from app.crud.profile import get_profile
from app.crud.tenant import get_tenant
from app.data import DataLayer, get_data
from app.db import get_db
from app.schemas.user import UserCreate
from app.services.accounts import register_owner

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def landing(request: Request, data: DataLayer = Depends(get_data)):
    try:
        screenshots = await data.screenshots.list()
    except StorageNotConfigured:
        screenshots = []
    return templates.TemplateResponse(
        request, "landing.html", {"screenshots": screenshots, **notices(request)}
    )


# ---------- Register ----------
@router.get("/auth/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return templates.TemplateResponse(request, "auth/register.html", notices(request))


@router.post("/auth/register", response_class=HTMLResponse)
async def register(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    full_name: str = Form(""),
    restaurant_name: str = Form(...),
    db: AsyncSession = Depends(get_db),
    user_manager=Depends(get_user_manager),
):
    form = {"email": email, "full_name": full_name, "restaurant_name": restaurant_name}

    def fail(message: str):
        return templates.TemplateResponse(
            request, "auth/register.html", {"error": message, "form": form}, status_code=400
        )

    restaurant_name = restaurant_name.strip()
    if not restaurant_name:
        return fail("Restaurant name is required.")

    try:
        user_create = UserCreate(email=email.strip(), password=password)
    except ValidationError:
        return fail("Please enter a valid email address.")

    try:
        await register_owner(
            db,
            user_manager,
            user_create,
            restaurant_name=restaurant_name,
            full_name=full_name.strip() or None,
            request=request,
        )
    except exceptions.UserAlreadyExists:
        return fail("An account with this email already exists.")
    except exceptions.InvalidPasswordException as e:
        return fail(str(e.reason))
    except IntegrityError:
        log.warning("register: tenant slug clash for %s", restaurant_name)
        return fail("Could not create your restaurant right now. Please try again.")

    return redirect_with("/auth/login", success="Account created. Please sign in.")


# ---------- Login ----------
@router.get("/auth/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return templates.TemplateResponse(request, "auth/login.html", notices(request))


@router.post("/auth/login", response_class=HTMLResponse)
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_db),
    user_manager=Depends(get_user_manager),
):
    def fail(message: str):
        return templates.TemplateResponse(
            request, "auth/login.html", {"error": message, "form": {"email": email}}, status_code=400
        )

    credentials = OAuth2PasswordRequestForm(username=email.strip(), password=password)
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        return fail("Invalid email or password.")

    profile = await get_profile(db, user.id)
    tenant = await get_tenant(db, profile.tenant_id) if profile and profile.tenant_id else None
    if not tenant:
        log.warning("login: user %s has no restaurant", user.id)
        return fail("No restaurant is linked to this account.")

    await user_manager.on_after_login(user, request)
    response = RedirectResponse(url=f"/admin/{tenant.slug}", status_code=303)
    set_session_cookie(response, await get_jwt_strategy().write_token(user))
    return response


@router.get("/auth/logout")
async def logout(request: Request):
    request.session.clear()
    response = RedirectResponse(url="/", status_code=302)
    clear_session_cookie(response)
    return response
