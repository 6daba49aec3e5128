"""Platform settings, for the privileged account only."""
import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from app.api.pages import notices, redirect_with, templates
from app.auth.dependencies import get_privileged_user
from app.core.config import get_settings
from app.core.errors import StorageNotConfigured
from app.data import DataLayer, get_data
from app.services.uploads import read_image

log = logging.getLogger(__name__)

router = APIRouter()

SCREENSHOTS_PAGE = "/settings/screenshots-upload"


@router.get("/settings", response_class=HTMLResponse)
async def settings_home(request: Request, user=Depends(get_privileged_user)):
    return templates.TemplateResponse(
        request,
        "settings/index.html",
        {"user": user, "default_slug": get_settings().default_tenant_slug, **notices(request)},
    )


@router.get(SCREENSHOTS_PAGE, response_class=HTMLResponse)
async def screenshots_page(
    request: Request,
    user=Depends(get_privileged_user),
    data: DataLayer = Depends(get_data),
):
    storage_error = None
    try:
        screenshots = await data.screenshots.list()
    except StorageNotConfigured as e:
        screenshots, storage_error = [], str(e)
    return templates.TemplateResponse(
        request,
        "settings/screenshots.html",
        {
            "user": user,
            "screenshots": screenshots,
            "storage_error": storage_error,
            **notices(request),
        },
    )


@router.post(f"{SCREENSHOTS_PAGE}/upload")
async def upload_screenshot(
    file: UploadFile = File(...),
    user=Depends(get_privileged_user),
    data: DataLayer = Depends(get_data),
):
    try:
        contents = await read_image(file)
        shot = await data.screenshots.upload(file.filename, contents, file.content_type)
    except ValueError as e:
        return redirect_with(SCREENSHOTS_PAGE, error=str(e))
    except StorageNotConfigured as e:
        log.error("screenshot upload: %s", e)
        return redirect_with(SCREENSHOTS_PAGE, error=str(e))
    return redirect_with(SCREENSHOTS_PAGE, success=f"Uploaded {shot.name}")


@router.post(f"{SCREENSHOTS_PAGE}/delete")
async def delete_screenshot(
    name: str = Form(...),
    user=Depends(get_privileged_user),
    data: DataLayer = Depends(get_data),
):
    try:
        await data.screenshots.remove(name)
    except StorageNotConfigured as e:
        log.error("screenshot delete: %s", e)
        return redirect_with(SCREENSHOTS_PAGE, error=str(e))
    return redirect_with(SCREENSHOTS_PAGE, success=f"Deleted {name}")
