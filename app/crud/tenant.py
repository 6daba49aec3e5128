from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.errors import TenantNotFound
from app.models.tenant import Tenant


async def fetch_tenant_id_by_slug(db: AsyncSession, slug: str) -> int:
    """Resolve a tenant slug to its id, or raise TenantNotFound"""
    if not slug:
        raise TenantNotFound(slug)
    result = await db.execute(select(Tenant.id).where(Tenant.slug == slug))
    tenant_id = result.scalar_one_or_none()
    if tenant_id is None:
        raise TenantNotFound(slug)
    return tenant_id


async def get_tenant_by_slug(db: AsyncSession, slug: str):
    result = await db.execute(select(Tenant).where(Tenant.slug == slug))
    return result.scalar_one_or_none()


async def get_tenant(db: AsyncSession, tenant_id: int):
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    return result.scalar_one_or_none()


async def slug_exists(db: AsyncSession, slug: str) -> bool:
    result = await db.execute(select(Tenant.id).where(Tenant.slug == slug))
    return result.scalar_one_or_none() is not None


async def create_tenant(db: AsyncSession, slug: str, restaurant_name: str, owner_id=None):
    """Create a tenant row (flushed, not committed)"""
    tenant = Tenant(slug=slug, restaurant_name=restaurant_name, owner_id=owner_id)
    db.add(tenant)
    await db.flush()
    return tenant
