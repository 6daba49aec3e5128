from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from app.core.constants import SCREENSHOT_LIST_LIMIT, UPLOAD_PATHS
from app.services.query_cache import QueryCache
from app.utils import spaces

log = logging.getLogger(__name__)


@dataclass
class ScreenshotFile:
    name: str
    url: str


class ScreenshotsResource:
    """Platform marketing screenshots in a flat bucket folder (no tenant)."""

    name = "screenshots"

    def __init__(self, cache: QueryCache, folder: str = UPLOAD_PATHS["screenshots"]):
        self.cache = cache
        self.folder = folder

    def _prefix(self) -> str:
        return spaces.object_key(self.folder)

    async def list(self) -> list[ScreenshotFile]:
        async def fetcher():
            objects = await spaces.list_objects(prefix=self._prefix(), limit=SCREENSHOT_LIST_LIMIT)
            return [
                ScreenshotFile(name=obj["key"].rsplit("/", 1)[-1], url=spaces.public_url(obj["key"]))
                for obj in objects
            ]

        return await self.cache.fetch((self.name,), fetcher)

    async def upload(self, filename: str, data: bytes, content_type: Optional[str]) -> ScreenshotFile:
        name = os.path.basename(filename)
        key = f"{self._prefix()}/{name}"
        await spaces.put_public_object(key=key, body=data, content_type=content_type)
        self.cache.invalidate((self.name,))
        log.info("screenshot uploaded: %s", name)
        return ScreenshotFile(name=name, url=spaces.public_url(key))

    async def remove(self, name: str) -> None:
        await spaces.delete_object(key=f"{self._prefix()}/{os.path.basename(name)}")
        self.cache.invalidate((self.name,))
        log.info("screenshot removed: %s", name)
