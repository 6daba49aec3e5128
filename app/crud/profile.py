from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.profile import Profile
from app.schemas.profile import ProfileUpdate


async def get_profile(db: AsyncSession, user_id):
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    return result.scalar_one_or_none()


async def create_profile(db: AsyncSession, user_id, tenant_id: int, full_name: str = None):
    """Create the profile row (flushed, not committed)"""
    profile = Profile(id=user_id, tenant_id=tenant_id, full_name=full_name)
    db.add(profile)
    await db.flush()
    return profile


async def update_profile(db: AsyncSession, user_id, updates: ProfileUpdate):
    profile = await get_profile(db, user_id)
    if not profile:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(profile, key, value)

    await db.commit()
    await db.refresh(profile)
    return profile
