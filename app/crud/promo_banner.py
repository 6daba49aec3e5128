from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.promo_banner import PromoBanner
from app.schemas.promo_banner import PromoBannerCreate, PromoBannerUpdate
import uuid


async def create_promo_banner(db: AsyncSession, tenant_id: int, banner: PromoBannerCreate):
    new_banner = PromoBanner(id=str(uuid.uuid4()), tenant_id=tenant_id, **banner.model_dump())
    db.add(new_banner)
    await db.commit()
    await db.refresh(new_banner)
    return new_banner


async def get_promo_banners(db: AsyncSession, tenant_id: int, active_only: bool = False, now: datetime = None):
    """All banners for a tenant; active_only keeps active, unexpired ones"""
    query = select(PromoBanner).where(PromoBanner.tenant_id == tenant_id)

    if active_only:
        now = now or datetime.now(timezone.utc)
        query = query.where(
            PromoBanner.active == True,
            or_(PromoBanner.expires_at.is_(None), PromoBanner.expires_at > now),
        )

    result = await db.execute(query.order_by(PromoBanner.created_at.desc()))
    return result.scalars().all()


async def get_promo_banner(db: AsyncSession, banner_id: str, tenant_id: int):
    result = await db.execute(
        select(PromoBanner).where(PromoBanner.id == banner_id, PromoBanner.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def update_promo_banner(db: AsyncSession, banner_id: str, tenant_id: int, updates: PromoBannerUpdate):
    banner = await get_promo_banner(db, banner_id, tenant_id)
    if not banner:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(banner, key, value)

    await db.commit()
    await db.refresh(banner)
    return banner


async def delete_promo_banner(db: AsyncSession, banner_id: str, tenant_id: int):
    banner = await get_promo_banner(db, banner_id, tenant_id)
    if banner:
        await db.delete(banner)
        await db.commit()
    return banner
