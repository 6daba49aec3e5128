import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.errors import RecordNotFound
from app.crud import profile as crud
from app.schemas.profile import ProfileRead, ProfileUpdate
from app.services.query_cache import QueryCache

log = logging.getLogger(__name__)


class ProfileResource:
    """Profile of the signed-in account, keyed by user id rather than tenant."""

    name = "profile"

    def __init__(self, session_factory: async_sessionmaker, cache: QueryCache):
        self.session_factory = session_factory
        self.cache = cache

    async def get(self, user_id) -> Optional[ProfileRead]:
        async def fetcher():
            async with self.session_factory() as db:
                profile = await crud.get_profile(db, user_id)
                return ProfileRead.model_validate(profile) if profile else None

        return await self.cache.fetch((self.name, str(user_id)), fetcher)

    async def update(self, user_id, updates: ProfileUpdate) -> ProfileRead:
        async with self.session_factory() as db:
            profile = await crud.update_profile(db, user_id, updates)
            if not profile:
                raise RecordNotFound("Profile", user_id)
            result = ProfileRead.model_validate(profile)
        self.cache.invalidate((self.name, str(user_id)))
        log.info("profile updated: user=%s", user_id)
        return result
