# auth/dependencies.py
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.crud.profile import get_profile
from app.crud.tenant import get_tenant_by_slug
from app.db import get_db
from app.models.user import User


def is_privileged(user) -> bool:
    """Exact match against the configured account id; unset means nobody."""
    privileged_id = get_settings().privileged_user_id
    return bool(user and privileged_id and str(user.id) == privileged_id)


async def get_current_user(request: Request) -> User:
    # Populated by AuthGateMiddleware on protected paths
    user = getattr(request.state, "user", None)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


async def get_privileged_user(user: User = Depends(get_current_user)) -> User:
    if not is_privileged(user):
        raise HTTPException(status_code=403, detail="Privileged access only")
    return user


async def get_tenant_for_admin(
    tenant_slug: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """The tenant named in the path, if this account may manage it."""
    tenant = await get_tenant_by_slug(db, tenant_slug)
    if not tenant:
        raise HTTPException(status_code=404, detail="Restaurant not found")

    if is_privileged(user):
        return tenant

    profile = await get_profile(db, user.id)
    if not profile or profile.tenant_id != tenant.id:
        raise HTTPException(status_code=403, detail="Not your restaurant")
    return tenant
