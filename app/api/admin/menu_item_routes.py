import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.api.dependencies import get_cdn_client
from app.api.pages import first_error, notices, redirect_with, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin
from app.core.constants import UPLOAD_PATHS, MenuCategory
from app.core.errors import CdnError, CdnNotConfigured, RecordNotFound
from app.data import DataLayer, get_data
from app.schemas.menu_item import MenuItemCreate, MenuItemUpdate
from app.services.cdn import CloudinaryClient
from app.services.uploads import UploadOptions, read_image, upload_file
from app.utils.cdn_names import extract_public_id

log = logging.getLogger(__name__)

router = APIRouter()


async def _upload_photo(photo: Optional[UploadFile], tenant_slug: str, cdn: CloudinaryClient) -> Optional[str]:
    """CDN url for an uploaded photo, or None when no file was sent"""
    if not photo or not photo.filename:
        return None
    contents = await read_image(photo)
    result = await upload_file(
        contents,
        photo.filename,
        photo.content_type,
        UploadOptions(
            target="cdn",
            folder=f"{UPLOAD_PATHS['menu_items']}/{tenant_slug}",
            public_id_prefix=uuid.uuid4().hex[:8],
        ),
        cdn=cdn,
    )
    return result.url


# ----- List + create form
@router.get("/admin/{tenant_slug}/menu-items", response_class=HTMLResponse)
async def menu_items_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    items = await data.menu_items.list(tenant.slug)
    return templates.TemplateResponse(
        request,
        "admin/menu_items.html",
        {
            "tenant": tenant,
            "user": user,
            "items": items,
            "categories": list(MenuCategory),
            **notices(request),
        },
    )


# ----- Create
@router.post("/admin/{tenant_slug}/menu-items/create")
async def create_menu_item(
    name: str = Form(...),
    description: str = Form(""),
    price: str = Form(...),
    category: str = Form(...),
    image_url: str = Form(""),
    is_available: bool = Form(False),
    is_featured: bool = Form(False),
    photo: UploadFile = File(None),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
    cdn: CloudinaryClient = Depends(get_cdn_client),
):
    back = f"/admin/{tenant.slug}/menu-items"
    try:
        uploaded = await _upload_photo(photo, tenant.slug, cdn)
        item = MenuItemCreate(
            name=name.strip(),
            description=description.strip() or None,
            price=price.strip(),
            category=category,
            image_url=uploaded or image_url.strip() or None,
            is_available=is_available,
            is_featured=is_featured,
        )
        created = await data.menu_items.create(tenant.slug, item)
    except ValidationError as e:
        return redirect_with(back, error=first_error(e))
    except ValueError as e:
        return redirect_with(back, error=str(e))
    except (CdnError, CdnNotConfigured) as e:
        log.warning("menu item photo upload failed: tenant=%s err=%s", tenant.slug, e)
        return redirect_with(back, error=f"Photo upload failed: {e}")
    except SQLAlchemyError:
        log.exception("create menu item failed: tenant=%s", tenant.slug)
        return redirect_with(back, error="Could not save menu item")

    return redirect_with(back, success=f"Added {created.name}")


# ----- Edit form
@router.get("/admin/{tenant_slug}/menu-items/{item_id}/edit", response_class=HTMLResponse)
async def edit_menu_item_page(
    request: Request,
    item_id: str,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    item = await data.menu_items.get(tenant.slug, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return templates.TemplateResponse(
        request,
        "admin/menu_item_edit.html",
        {
            "tenant": tenant,
            "user": user,
            "item": item,
            "categories": list(MenuCategory),
            **notices(request),
        },
    )


# ----- Update
@router.post("/admin/{tenant_slug}/menu-items/{item_id}/update")
async def update_menu_item(
    item_id: str,
    name: str = Form(...),
    description: str = Form(""),
    price: str = Form(...),
    category: str = Form(...),
    image_url: str = Form(""),
    is_available: bool = Form(False),
    is_featured: bool = Form(False),
    photo: UploadFile = File(None),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
    cdn: CloudinaryClient = Depends(get_cdn_client),
):
    back = f"/admin/{tenant.slug}/menu-items"
    try:
        uploaded = await _upload_photo(photo, tenant.slug, cdn)
        updates = MenuItemUpdate(
            name=name.strip(),
            description=description.strip() or None,
            price=price.strip(),
            category=category,
            image_url=uploaded or image_url.strip() or None,
            is_available=is_available,
            is_featured=is_featured,
        )
        updated = await data.menu_items.update(tenant.slug, item_id, updates)
    except RecordNotFound:
        return redirect_with(back, error="Menu item not found")
    except ValidationError as e:
        return redirect_with(f"{back}/{item_id}/edit", error=first_error(e))
    except ValueError as e:
        return redirect_with(f"{back}/{item_id}/edit", error=str(e))
    except (CdnError, CdnNotConfigured) as e:
        log.warning("menu item photo upload failed: tenant=%s err=%s", tenant.slug, e)
        return redirect_with(f"{back}/{item_id}/edit", error=f"Photo upload failed: {e}")
    except SQLAlchemyError:
        log.exception("update menu item failed: tenant=%s id=%s", tenant.slug, item_id)
        return redirect_with(back, error="Could not save menu item")

    return redirect_with(back, success=f"Updated {updated.name}")


# ----- Toggle availability
@router.post("/admin/{tenant_slug}/menu-items/{item_id}/toggle")
async def toggle_menu_item(
    item_id: str,
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/menu-items"
    item = await data.menu_items.get(tenant.slug, item_id)
    if not item:
        return redirect_with(back, error="Menu item not found")
    await data.menu_items.update(tenant.slug, item_id, MenuItemUpdate(is_available=not item.is_available))
    state = "available" if not item.is_available else "hidden"
    return redirect_with(back, success=f"{item.name} is now {state}")


# ----- Delete
@router.post("/admin/{tenant_slug}/menu-items/{item_id}/delete")
async def delete_menu_item(
    item_id: str,
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
    cdn: CloudinaryClient = Depends(get_cdn_client),
):
    back = f"/admin/{tenant.slug}/menu-items"
    try:
        deleted = await data.menu_items.delete(tenant.slug, item_id)
    except RecordNotFound:
        return redirect_with(back, error="Menu item not found")
    except SQLAlchemyError:
        log.exception("delete menu item failed: tenant=%s id=%s", tenant.slug, item_id)
        return redirect_with(back, error="Could not delete menu item")

    # also remove the photo from the CDN
    public_id = extract_public_id(deleted.image_url)
    if public_id:
        try:
            result = await cdn.destroy(public_id)
        except CdnNotConfigured as e:
            log.warning("menu item photo kept: tenant=%s public_id=%s err=%s", tenant.slug, public_id, e)
        else:
            if not result.success:
                log.warning("menu item photo kept: tenant=%s public_id=%s err=%s", tenant.slug, public_id, result.error)

    return redirect_with(back, success=f"Deleted {deleted.name}")
