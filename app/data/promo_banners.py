from __future__ import annotations

import logging

from app.core.errors import RecordNotFound
from app.crud import promo_banner as crud
from app.data.base import TenantResource
from app.schemas.promo_banner import PromoBannerCreate, PromoBannerRead, PromoBannerUpdate

log = logging.getLogger(__name__)


class PromoBannersResource(TenantResource):
    name = "promo_banners"
    table = "promo_banners"

    async def list(self, slug: str) -> list[PromoBannerRead]:
        async def query(db, tenant_id):
            banners = await crud.get_promo_banners(db, tenant_id)
            return [PromoBannerRead.model_validate(b) for b in banners]

        return await self._read(slug, query)

    async def list_active(self, slug: str) -> list[PromoBannerRead]:
        """Active banners that have not expired."""
        async def query(db, tenant_id):
            banners = await crud.get_promo_banners(db, tenant_id, active_only=True)
            return [PromoBannerRead.model_validate(b) for b in banners]

        return await self._read(slug, query, "active")

    async def create(self, slug: str, banner: PromoBannerCreate) -> PromoBannerRead:
        async def mutation(db, tenant_id):
            created = await crud.create_promo_banner(db, tenant_id, banner)
            log.info("promo_banner created: tenant=%s id=%s", tenant_id, created.id)
            return PromoBannerRead.model_validate(created)

        return await self._write(slug, mutation)

    async def update(self, slug: str, banner_id: str, updates: PromoBannerUpdate) -> PromoBannerRead:
        async def mutation(db, tenant_id):
            updated = await crud.update_promo_banner(db, banner_id, tenant_id, updates)
            if not updated:
                raise RecordNotFound("Promo banner", banner_id)
            log.info("promo_banner updated: tenant=%s id=%s", tenant_id, banner_id)
            return PromoBannerRead.model_validate(updated)

        return await self._write(slug, mutation)

    async def delete(self, slug: str, banner_id: str) -> PromoBannerRead:
        async def mutation(db, tenant_id):
            deleted = await crud.delete_promo_banner(db, banner_id, tenant_id)
            if not deleted:
                raise RecordNotFound("Promo banner", banner_id)
            log.info("promo_banner deleted: tenant=%s id=%s", tenant_id, banner_id)
            return PromoBannerRead.model_validate(deleted)

        return await self._write(slug, mutation)
