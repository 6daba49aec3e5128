from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pages import notices, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin, is_privileged
from app.crud.profile import get_profile
from app.crud.tenant import get_tenant
from app.data import DataLayer, get_data
from app.db import get_db

router = APIRouter()


@router.get("/admin")
async def admin_home(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    """Send the account to its own restaurant's dashboard"""
    profile = await get_profile(db, user.id)
    tenant = await get_tenant(db, profile.tenant_id) if profile and profile.tenant_id else None
    if not tenant:
        raise HTTPException(status_code=404, detail="No restaurant linked to this account")
    return RedirectResponse(url=f"/admin/{tenant.slug}", status_code=302)


@router.get("/admin/{tenant_slug}", response_class=HTMLResponse)
async def admin_dashboard(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    slug = tenant.slug
    items = await data.menu_items.list(slug)
    hours = await data.opening_hours.list(slug)
    banners = await data.promo_banners.list(slug)
    info = await data.restaurant_info.get(slug)
    profile = await data.profile.get(user.id)

    return templates.TemplateResponse(
        request,
        "admin/dashboard.html",
        {
            "tenant": tenant,
            "user": user,
            "profile": profile,
            "is_privileged": is_privileged(user),
            "stats": {
                "menu_items": len(items),
                "available": sum(1 for i in items if i.is_available),
                "opening_hours": len(hours),
                "promo_banners": len(banners),
                "active_banners": sum(1 for b in banners if b.active),
            },
            "has_info": info is not None,
            **notices(request),
        },
    )
