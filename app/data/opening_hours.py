from __future__ import annotations

import logging
from typing import Iterable, NamedTuple

from app.core.constants import DAY_NAMES
from app.core.errors import RecordNotFound
from app.crud import opening_hour as crud
from app.data.base import TenantResource
from app.schemas.opening_hour import OpeningHourCreate, OpeningHourRead, OpeningHourUpdate

log = logging.getLogger(__name__)


class DaySchedule(NamedTuple):
    day_of_week: int
    name: str
    slots: list


def group_by_day(hours: Iterable[OpeningHourRead]) -> list[DaySchedule]:
    """All seven days, each with its slots in slot order (empty = closed)."""
    days = [DaySchedule(i, name, []) for i, name in enumerate(DAY_NAMES)]
    for hour in sorted(hours, key=lambda h: (h.day_of_week, h.slot_index)):
        days[hour.day_of_week].slots.append(hour)
    return days


class OpeningHoursResource(TenantResource):
    name = "opening_hours"
    table = "opening_hours"

    async def list(self, slug: str) -> list[OpeningHourRead]:
        async def query(db, tenant_id):
            hours = await crud.get_opening_hours(db, tenant_id)
            return [OpeningHourRead.model_validate(h) for h in hours]

        return await self._read(slug, query)

    async def create(self, slug: str, hour: OpeningHourCreate) -> OpeningHourRead:
        async def mutation(db, tenant_id):
            created = await crud.create_opening_hour(db, tenant_id, hour)
            log.info(
                "opening_hour created: tenant=%s day=%s slot=%s",
                tenant_id, hour.day_of_week, hour.slot_index,
            )
            return OpeningHourRead.model_validate(created)

        return await self._write(slug, mutation)

    async def update(self, slug: str, hour_id: str, updates: OpeningHourUpdate) -> OpeningHourRead:
        async def mutation(db, tenant_id):
            updated = await crud.update_opening_hour(db, hour_id, tenant_id, updates)
            if not updated:
                raise RecordNotFound("Opening hour", hour_id)
            log.info("opening_hour updated: tenant=%s id=%s", tenant_id, hour_id)
            return OpeningHourRead.model_validate(updated)

        return await self._write(slug, mutation)

    async def delete(self, slug: str, hour_id: str) -> OpeningHourRead:
        async def mutation(db, tenant_id):
            deleted = await crud.delete_opening_hour(db, hour_id, tenant_id)
            if not deleted:
                raise RecordNotFound("Opening hour", hour_id)
            log.info("opening_hour deleted: tenant=%s id=%s", tenant_id, hour_id)
            return OpeningHourRead.model_validate(deleted)

        return await self._write(slug, mutation)
