### snackbite/app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from dotenv import load_dotenv
from sqlalchemy.orm import configure_mappers

import app.models  # registers all models via models/__init__.py
from app.api import cloudinary_routes, public_routes, realtime_routes, settings_routes, storefront_routes
from app.api.admin import (
    dashboard_routes,
    media_routes,
    menu_item_routes,
    opening_hour_routes,
    profile_routes,
    promo_banner_routes,
    restaurant_info_routes,
)
from app.api.admin import settings_routes as admin_settings_routes
from app.auth.routes import auth_backend, fastapi_users
from app.core.config import get_settings
from app.data import DataLayer
from app.db import async_session, create_db_and_tables
from app.middleware.auth_gate import AuthGateMiddleware
from app.services.query_cache import QueryCache

configure_mappers()
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

settings = get_settings()

# Create the FastAPI app
app = FastAPI(title="SnackBite", version="1.0.0")

app.state.data = DataLayer(async_session, cache=QueryCache(stale_seconds=settings.query_stale_seconds))

# Gate for /admin and /settings (needs the auth cookie + user lookup)
app.add_middleware(AuthGateMiddleware, session_factory=async_session)

# Session middleware (storefront carts)
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# JSON auth API (cookie login/logout)
app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["auth"],
)


@app.on_event("startup")
async def on_startup():
    log.info("Starting DB setup...")
    await create_db_and_tables()
    log.info("DB schema ready.")


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(public_routes.router)
app.include_router(cloudinary_routes.router)
app.include_router(realtime_routes.router)
app.include_router(settings_routes.router)
app.include_router(dashboard_routes.router)
app.include_router(menu_item_routes.router)
app.include_router(opening_hour_routes.router)
app.include_router(restaurant_info_routes.router)
app.include_router(promo_banner_routes.router)
app.include_router(profile_routes.router)
app.include_router(admin_settings_routes.router)
app.include_router(media_routes.router)
# Catch-all /{tenant_slug} routes go last
app.include_router(storefront_routes.router)
