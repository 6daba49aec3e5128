import logging
from typing import Optional

from app.core.errors import RecordNotFound
from app.crud import restaurant_info as crud
from app.crud.tenant import get_tenant
from app.data.base import TenantResource
from app.schemas.restaurant_info import RestaurantInfoRead, RestaurantInfoUpsert

log = logging.getLogger(__name__)


class RestaurantInfoResource(TenantResource):
    name = "restaurant_info"
    table = "restaurant_info"

    async def get(self, slug: str) -> Optional[RestaurantInfoRead]:
        """The tenant's single info row, or None when not set up yet."""
        async def query(db, tenant_id):
            info = await crud.get_restaurant_info(db, tenant_id)
            return RestaurantInfoRead.model_validate(info) if info else None

        return await self._read(slug, query)

    async def get_name(self, slug: str) -> str:
        async def query(db, tenant_id):
            info = await crud.get_restaurant_info(db, tenant_id)
            if info and info.restaurant_name:
                return info.restaurant_name
            tenant = await get_tenant(db, tenant_id)
            return tenant.restaurant_name

        return await self._read(slug, query, "name")

    async def upsert(self, slug: str, values: RestaurantInfoUpsert) -> RestaurantInfoRead:
        async def mutation(db, tenant_id):
            info = await crud.upsert_restaurant_info(db, tenant_id, values)
            log.info("restaurant_info saved: tenant=%s", tenant_id)
            return RestaurantInfoRead.model_validate(info)

        return await self._write(slug, mutation)

    async def delete(self, slug: str) -> RestaurantInfoRead:
        async def mutation(db, tenant_id):
            info = await crud.delete_restaurant_info(db, tenant_id)
            if not info:
                raise RecordNotFound("Restaurant info", tenant_id)
            log.info("restaurant_info deleted: tenant=%s", tenant_id)
            return RestaurantInfoRead.model_validate(info)

        return await self._write(slug, mutation)
