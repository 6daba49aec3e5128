"""
Shared plumbing for the tenant-scoped data resources.

Every operation resolves the tenant from its slug first, so a read or write
costs at least two queries. Reads go through the query cache under
``(resource, slug, ...)``; successful writes invalidate ``(resource, slug)``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.crud.tenant import fetch_tenant_id_by_slug
from app.services.query_cache import QueryCache
from app.services.realtime import ChangeEvent, ChangeFeed, Subscription

log = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


@dataclass
class _WatchState:
    subscription: Optional[Subscription] = None
    listeners: list = field(default_factory=list)


class Watch:
    """Handle for one watcher; close() when the view goes away."""

    def __init__(self, resource: "TenantResource", key: tuple[str, int], listener: Optional[Listener]):
        self.resource = resource
        self.slug, self.tenant_id = key
        self._key = key
        self._listener = listener
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.resource._unwatch(self._key, self._listener)


class TenantResource:
    name: str = ""
    table: str = ""

    def __init__(self, session_factory: async_sessionmaker, cache: QueryCache, feed: ChangeFeed):
        self.session_factory = session_factory
        self.cache = cache
        self.feed = feed
        self._watches: dict[tuple[str, int], _WatchState] = {}

    def cache_key(self, slug: str, *extra) -> tuple:
        return (self.name, slug, *extra)

    async def tenant_id(self, slug: str) -> int:
        async with self.session_factory() as db:
            return await fetch_tenant_id_by_slug(db, slug)

    async def _read(
        self,
        slug: str,
        query: Callable[[AsyncSession, int], Awaitable[Any]],
        *extra,
    ) -> Any:
        async def fetcher():
            async with self.session_factory() as db:
                tenant_id = await fetch_tenant_id_by_slug(db, slug)
                return await query(db, tenant_id)

        return await self.cache.fetch(self.cache_key(slug, *extra), fetcher)

    async def _write(
        self,
        slug: str,
        mutation: Callable[[AsyncSession, int], Awaitable[Any]],
    ) -> Any:
        async with self.session_factory() as db:
            tenant_id = await fetch_tenant_id_by_slug(db, slug)
            result = await mutation(db, tenant_id)
        self.invalidate(slug)
        return result

    def invalidate(self, slug: str) -> None:
        self.cache.invalidate((self.name, slug))

    # ---------- change notification ----------
    async def watch(self, slug: str, listener: Optional[Listener] = None) -> Watch:
        """
        Start following changes for this resource and tenant.

        One feed subscription is shared by all watchers of the same
        (resource, tenant); any event invalidates the cached reads.
        """
        tenant_id = await self.tenant_id(slug)
        key = (slug, tenant_id)
        state = self._watches.get(key)
        if state is None:
            state = _WatchState()
            state.subscription = self.feed.subscribe(
                self.table, tenant_id, lambda change: self._on_change(key, change)
            )
            self.cache.retain(self.cache_key(slug))
            self._watches[key] = state
            log.info("watch opened: resource=%s tenant=%s", self.name, tenant_id)
        state.listeners.append(listener)
        return Watch(self, key, listener)

    def watcher_count(self, slug: str, tenant_id: int) -> int:
        state = self._watches.get((slug, tenant_id))
        return len(state.listeners) if state else 0

    def _on_change(self, key: tuple[str, int], change: ChangeEvent) -> None:
        slug, _ = key
        self.invalidate(slug)
        state = self._watches.get(key)
        if not state:
            return
        for listener in list(state.listeners):
            if listener is not None:
                listener(change)

    def _unwatch(self, key: tuple[str, int], listener: Optional[Listener]) -> None:
        state = self._watches.get(key)
        if state is None:
            return
        if listener in state.listeners:
            state.listeners.remove(listener)
        if not state.listeners:
            state.subscription.close()
            self.cache.release(self.cache_key(key[0]))
            del self._watches[key]
            log.info("watch closed: resource=%s tenant=%s", self.name, key[1])
