from __future__ import annotations

import logging
from typing import Optional

from app.core.errors import RecordNotFound
from app.crud import menu_item as crud
from app.data.base import TenantResource
from app.schemas.menu_item import MenuItemCreate, MenuItemRead, MenuItemUpdate

log = logging.getLogger(__name__)


class MenuItemsResource(TenantResource):
    name = "menu_items"
    table = "menu_items"

    async def list(self, slug: str) -> list[MenuItemRead]:
        """Every item for the admin view, newest first."""
        async def query(db, tenant_id):
            items = await crud.get_menu_items(db, tenant_id)
            return [MenuItemRead.model_validate(i) for i in items]

        return await self._read(slug, query)

    async def list_available(self, slug: str) -> list[MenuItemRead]:
        """Public menu: only items marked available."""
        async def query(db, tenant_id):
            items = await crud.get_menu_items(db, tenant_id, available_only=True)
            return [MenuItemRead.model_validate(i) for i in items]

        return await self._read(slug, query, "available")

    async def get(self, slug: str, item_id: str) -> Optional[MenuItemRead]:
        for item in await self.list(slug):
            if item.id == item_id:
                return item
        return None

    async def create(self, slug: str, item: MenuItemCreate) -> MenuItemRead:
        async def mutation(db, tenant_id):
            created = await crud.create_menu_item(db, tenant_id, item)
            log.info("menu_item created: tenant=%s id=%s", tenant_id, created.id)
            return MenuItemRead.model_validate(created)

        return await self._write(slug, mutation)

    async def update(self, slug: str, item_id: str, updates: MenuItemUpdate) -> MenuItemRead:
        async def mutation(db, tenant_id):
            updated = await crud.update_menu_item(db, item_id, tenant_id, updates)
            if not updated:
                raise RecordNotFound("Menu item", item_id)
            log.info("menu_item updated: tenant=%s id=%s", tenant_id, item_id)
            return MenuItemRead.model_validate(updated)

        return await self._write(slug, mutation)

    async def delete(self, slug: str, item_id: str) -> MenuItemRead:
        async def mutation(db, tenant_id):
            deleted = await crud.delete_menu_item(db, item_id, tenant_id)
            if not deleted:
                raise RecordNotFound("Menu item", item_id)
            log.info("menu_item deleted: tenant=%s id=%s", tenant_id, item_id)
            return MenuItemRead.model_validate(deleted)

        return await self._write(slug, mutation)
