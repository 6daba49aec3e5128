import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.manager import UserManager
from app.crud.profile import create_profile
from app.crud.tenant import create_tenant
from app.schemas.user import UserCreate
from app.utils.slugify import get_unique_tenant_slug

log = logging.getLogger(__name__)


async def register_owner(
    db: AsyncSession,
    user_manager: UserManager,
    user_create: UserCreate,
    restaurant_name: str,
    full_name: Optional[str] = None,
    request: Optional[Request] = None,
):
    """
    Create an account together with its restaurant.

    The user row is committed by the user manager first; the tenant (owned
    by the user, with a unique slug derived from the name) and the profile
    linking the two are committed together afterwards. If that second step
    fails the user is deleted again and the error re-raised.
    Raises fastapi_users.exceptions.UserAlreadyExists / InvalidPasswordException.
    """
    user = await user_manager.create(user_create, safe=True, request=request)
    user_id = user.id

    try:
        slug = await get_unique_tenant_slug(db, restaurant_name)
        tenant = await create_tenant(db, slug=slug, restaurant_name=restaurant_name, owner_id=user_id)
        await create_profile(db, user_id, tenant.id, full_name=full_name)
        await db.commit()
    except SQLAlchemyError:
        log.warning("tenant setup failed, removing user %s", user_id)
        await db.rollback()
        await db.refresh(user)
        await user_manager.delete(user, request=request)
        raise

    log.info("tenant created: slug=%s owner=%s", slug, user_id)
    return user, tenant
