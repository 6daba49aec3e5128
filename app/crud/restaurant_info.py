from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.restaurant_info import RestaurantInfo
from app.schemas.restaurant_info import RestaurantInfoUpsert


async def get_restaurant_info(db: AsyncSession, tenant_id: int):
    """One row per tenant, or None"""
    result = await db.execute(select(RestaurantInfo).where(RestaurantInfo.tenant_id == tenant_id))
    return result.scalar_one_or_none()


async def upsert_restaurant_info(db: AsyncSession, tenant_id: int, values: RestaurantInfoUpsert):
    """Insert or update the tenant's info row, keyed on tenant_id. Fields left unset keep their stored value."""
    payload = values.model_dump(mode="json", exclude_unset=True)

    info = await get_restaurant_info(db, tenant_id)
    if info is None:
        info = RestaurantInfo(tenant_id=tenant_id)
        db.add(info)

    for key, value in payload.items():
        setattr(info, key, value)

    await db.commit()
    await db.refresh(info)
    return info


async def delete_restaurant_info(db: AsyncSession, tenant_id: int):
    info = await get_restaurant_info(db, tenant_id)
    if info:
        await db.delete(info)
        await db.commit()
    return info
