"""
Row-level change notification.

Committed inserts, updates and deletes of tenant-scoped rows are captured by
SQLAlchemy session events and published on ``change_feed``. Subscribers are
keyed by ``(table, tenant_id)`` and only ever receive events for that pair.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

log = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"

WATCHED_TABLES = {"menu_items", "opening_hours", "restaurant_info", "promo_banners", "profiles"}

_PENDING_KEY = "pending_change_events"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    tenant_id: int
    type: str
    record_id: Optional[str] = None


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    def __init__(self, feed: "ChangeFeed", table: str, tenant_id: int, callback: ChangeCallback):
        self._feed = feed
        self.table = table
        self.tenant_id = tenant_id
        self.callback = callback
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed._remove(self)


class ChangeFeed:
    def __init__(self):
        self._subscribers: dict[tuple[str, int], list[Subscription]] = defaultdict(list)

    def subscribe(self, table: str, tenant_id: int, callback: ChangeCallback) -> Subscription:
        sub = Subscription(self, table, tenant_id, callback)
        self._subscribers[(table, tenant_id)].append(sub)
        log.debug("subscribed: table=%s tenant=%s", table, tenant_id)
        return sub

    def subscriber_count(self, table: str, tenant_id: int) -> int:
        return len(self._subscribers.get((table, tenant_id), []))

    def publish(self, change: ChangeEvent) -> None:
        for sub in list(self._subscribers.get((change.table, change.tenant_id), [])):
            try:
                sub.callback(change)
            except Exception:
                log.exception("change callback failed: table=%s tenant=%s", change.table, change.tenant_id)

    def _remove(self, sub: Subscription) -> None:
        key = (sub.table, sub.tenant_id)
        subs = self._subscribers.get(key)
        if not subs:
            return
        if sub in subs:
            subs.remove(sub)
        if not subs:
            del self._subscribers[key]


change_feed = ChangeFeed()


def _describe(obj, change_type: str) -> Optional[ChangeEvent]:
    table = getattr(obj, "__tablename__", None)
    tenant_id = getattr(obj, "tenant_id", None)
    if table not in WATCHED_TABLES or tenant_id is None:
        return None
    identity = inspect(obj).identity
    record_id = str(identity[0]) if identity else None
    if record_id is None and getattr(obj, "id", None) is not None:
        record_id = str(obj.id)
    return ChangeEvent(table=table, tenant_id=tenant_id, type=change_type, record_id=record_id)


@event.listens_for(Session, "after_flush")
def _collect_changes(session, flush_context):
    pending = session.info.setdefault(_PENDING_KEY, [])
    for obj in session.new:
        change = _describe(obj, INSERT)
        if change:
            pending.append(change)
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            change = _describe(obj, UPDATE)
            if change:
                pending.append(change)
    for obj in session.deleted:
        change = _describe(obj, DELETE)
        if change:
            pending.append(change)


@event.listens_for(Session, "after_commit")
def _publish_changes(session):
    pending = session.info.pop(_PENDING_KEY, [])
    for change in pending:
        change_feed.publish(change)


@event.listens_for(Session, "after_rollback")
def _discard_changes(session):
    session.info.pop(_PENDING_KEY, None)
