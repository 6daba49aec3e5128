import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.dependencies import get_cdn_client
from app.auth.dependencies import get_tenant_for_admin
from app.core.errors import CdnNotConfigured
from app.schemas.cdn import DestroyRequest, DestroyResponse
from app.services.cdn import CloudinaryClient

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/admin/{tenant_slug}/media/delete", response_model=DestroyResponse)
async def delete_media(
    payload: DestroyRequest,
    tenant=Depends(get_tenant_for_admin),
    cdn: CloudinaryClient = Depends(get_cdn_client),
):
    """Remove an uploaded image from the CDN (missing counts as removed)"""
    try:
        result = await cdn.destroy(payload.public_id)
    except CdnNotConfigured as e:
        log.error("media delete: %s", e)
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    if not result.success:
        log.warning("media delete failed: tenant=%s public_id=%s err=%s", tenant.slug, payload.public_id, result.error)
    return DestroyResponse(success=result.success, error=result.error, result=result.result)
