from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.opening_hour import OpeningHour
from app.schemas.opening_hour import OpeningHourCreate, OpeningHourUpdate
import uuid


async def create_opening_hour(db: AsyncSession, tenant_id: int, hour: OpeningHourCreate):
    # open_time < close_time is deliberately not checked (overnight slots)
    new_hour = OpeningHour(id=str(uuid.uuid4()), tenant_id=tenant_id, **hour.model_dump())
    db.add(new_hour)
    await db.commit()
    await db.refresh(new_hour)
    return new_hour


async def get_opening_hours(db: AsyncSession, tenant_id: int):
    result = await db.execute(
        select(OpeningHour)
        .where(OpeningHour.tenant_id == tenant_id)
        .order_by(OpeningHour.day_of_week.asc(), OpeningHour.slot_index.asc())
    )
    return result.scalars().all()


async def get_opening_hour(db: AsyncSession, hour_id: str, tenant_id: int):
    result = await db.execute(
        select(OpeningHour).where(OpeningHour.id == hour_id, OpeningHour.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def update_opening_hour(db: AsyncSession, hour_id: str, tenant_id: int, updates: OpeningHourUpdate):
    hour = await get_opening_hour(db, hour_id, tenant_id)
    if not hour:
        return None

    hour.open_time = updates.open_time
    hour.close_time = updates.close_time
    hour.slot_index = updates.slot_index

    await db.commit()
    await db.refresh(hour)
    return hour


async def delete_opening_hour(db: AsyncSession, hour_id: str, tenant_id: int):
    hour = await get_opening_hour(db, hour_id, tenant_id)
    if hour:
        await db.delete(hour)
        await db.commit()
    return hour
