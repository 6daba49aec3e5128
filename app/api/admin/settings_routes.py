from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.api.pages import notices, templates
from app.auth.dependencies import get_privileged_user, get_tenant_for_admin

router = APIRouter()


@router.get("/admin/{tenant_slug}/settings", response_class=HTMLResponse)
async def tenant_settings_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_privileged_user),
):
    return templates.TemplateResponse(
        request,
        "admin/settings.html",
        {"tenant": tenant, "user": user, **notices(request)},
    )
