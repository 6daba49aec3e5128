import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.api.pages import first_error, notices, redirect_with, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin
from app.core.constants import PromoActionType
from app.core.errors import RecordNotFound
from app.data import DataLayer, get_data
from app.schemas.promo_banner import PromoBannerCreate, PromoBannerUpdate
from app.utils.icons import ICON_REGISTRY

log = logging.getLogger(__name__)

router = APIRouter()


def build_action_metadata(
    subject: str = "",
    body: str = "",
    target: str = "",
    filename: str = "",
) -> Optional[dict]:
    """Extras per action type; empty fields are left out"""
    metadata = {
        "subject": subject.strip(),
        "body": body.strip(),
        "target": target.strip(),
        "filename": filename.strip(),
    }
    metadata = {key: value for key, value in metadata.items() if value}
    return metadata or None


def _banner_fields(
    title, description, active, background_color, text_color, button_text, icon,
    action_type, action_value, action_subject, action_body, action_target, action_filename, expires_at,
) -> dict:
    return {
        "title": title.strip(),
        "description": description.strip() or None,
        "active": active,
        "background_color": background_color.strip() or None,
        "text_color": text_color.strip() or None,
        "button_text": button_text.strip() or None,
        "icon": icon.strip() or None,
        "action_type": action_type or None,
        "action_value": action_value.strip() or None,
        "action_metadata": build_action_metadata(action_subject, action_body, action_target, action_filename),
        "expires_at": expires_at.strip() or None,
    }


@router.get("/admin/{tenant_slug}/promo-banners", response_class=HTMLResponse)
async def promo_banners_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    banners = await data.promo_banners.list(tenant.slug)
    return templates.TemplateResponse(
        request,
        "admin/promo_banners.html",
        {
            "tenant": tenant,
            "user": user,
            "banners": banners,
            "action_types": list(PromoActionType),
            "icons": list(ICON_REGISTRY.values()),
            **notices(request),
        },
    )


@router.post("/admin/{tenant_slug}/promo-banners/create")
async def create_promo_banner(
    title: str = Form(...),
    description: str = Form(""),
    active: bool = Form(False),
    background_color: str = Form(""),
    text_color: str = Form(""),
    button_text: str = Form(""),
    icon: str = Form(""),
    action_type: str = Form(""),
    action_value: str = Form(""),
    action_subject: str = Form(""),
    action_body: str = Form(""),
    action_target: str = Form(""),
    action_filename: str = Form(""),
    expires_at: str = Form(""),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/promo-banners"
    try:
        banner = PromoBannerCreate(**_banner_fields(
            title, description, active, background_color, text_color, button_text, icon,
            action_type, action_value, action_subject, action_body, action_target, action_filename, expires_at,
        ))
        created = await data.promo_banners.create(tenant.slug, banner)
    except ValidationError as e:
        return redirect_with(back, error=first_error(e))
    except SQLAlchemyError:
        log.exception("create promo banner failed: tenant=%s", tenant.slug)
        return redirect_with(back, error="Could not save banner")
    return redirect_with(back, success=f"Banner \"{created.title}\" created")


@router.get("/admin/{tenant_slug}/promo-banners/{banner_id}/edit", response_class=HTMLResponse)
async def edit_promo_banner_page(
    request: Request,
    banner_id: str,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    banners = await data.promo_banners.list(tenant.slug)
    banner = next((b for b in banners if b.id == banner_id), None)
    if not banner:
        raise HTTPException(status_code=404, detail="Promo banner not found")
    return templates.TemplateResponse(
        request,
        "admin/promo_banner_edit.html",
        {
            "tenant": tenant,
            "user": user,
            "banner": banner,
            "action_types": list(PromoActionType),
            "icons": list(ICON_REGISTRY.values()),
            **notices(request),
        },
    )


@router.post("/admin/{tenant_slug}/promo-banners/{banner_id}/update")
async def update_promo_banner(
    banner_id: str,
    title: str = Form(...),
    description: str = Form(""),
    active: bool = Form(False),
    background_color: str = Form(""),
    text_color: str = Form(""),
    button_text: str = Form(""),
    icon: str = Form(""),
    action_type: str = Form(""),
    action_value: str = Form(""),
    action_subject: str = Form(""),
    action_body: str = Form(""),
    action_target: str = Form(""),
    action_filename: str = Form(""),
    expires_at: str = Form(""),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/promo-banners"
    try:
        updates = PromoBannerUpdate(**_banner_fields(
            title, description, active, background_color, text_color, button_text, icon,
            action_type, action_value, action_subject, action_body, action_target, action_filename, expires_at,
        ))
        updated = await data.promo_banners.update(tenant.slug, banner_id, updates)
    except RecordNotFound:
        return redirect_with(back, error="Promo banner not found")
    except ValidationError as e:
        return redirect_with(f"{back}/{banner_id}/edit", error=first_error(e))
    except SQLAlchemyError:
        log.exception("update promo banner failed: tenant=%s id=%s", tenant.slug, banner_id)
        return redirect_with(back, error="Could not save banner")
    return redirect_with(back, success=f"Banner \"{updated.title}\" updated")


@router.post("/admin/{tenant_slug}/promo-banners/{banner_id}/delete")
async def delete_promo_banner(
    banner_id: str,
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/promo-banners"
    try:
        await data.promo_banners.delete(tenant.slug, banner_id)
    except RecordNotFound:
        return redirect_with(back, error="Promo banner not found")
    except SQLAlchemyError:
        log.exception("delete promo banner failed: tenant=%s id=%s", tenant.slug, banner_id)
        return redirect_with(back, error="Could not delete banner")
    return redirect_with(back, success="Banner deleted")
