import logging
import time

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.pages import notices, redirect_with, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin
from app.core.constants import UPLOAD_PATHS
from app.core.errors import RecordNotFound, StorageNotConfigured
from app.data import DataLayer, get_data
from app.schemas.profile import ProfileUpdate
from app.services.uploads import UploadOptions, read_image, upload_file

log = logging.getLogger(__name__)

router = APIRouter()

MAX_AVATAR_SIZE = 2 * 1024 * 1024  # 2MB


@router.get("/admin/{tenant_slug}/profile", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    profile = await data.profile.get(user.id)
    return templates.TemplateResponse(
        request,
        "admin/profile.html",
        {"tenant": tenant, "user": user, "profile": profile, **notices(request)},
    )


@router.post("/admin/{tenant_slug}/profile/update")
async def update_profile(
    full_name: str = Form(""),
    avatar: UploadFile = File(None),
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/profile"
    updates = ProfileUpdate(full_name=full_name.strip() or None)

    try:
        if avatar and avatar.filename:
            contents = await read_image(avatar, max_size=MAX_AVATAR_SIZE)
            ext = avatar.filename.rsplit(".", 1)[-1].lower()
            result = await upload_file(
                contents,
                f"avatar-{int(time.time() * 1000)}.{ext}",
                avatar.content_type,
                UploadOptions(target="bucket", folder=f"{UPLOAD_PATHS['avatars']}/{user.id}"),
            )
            updates.avatar_url = result.url

        await data.profile.update(user.id, updates)
    except ValueError as e:
        return redirect_with(back, error=str(e))
    except StorageNotConfigured:
        log.error("avatar upload: storage not configured")
        return redirect_with(back, error="Failed to upload avatar")
    except RecordNotFound:
        return redirect_with(back, error="Profile not found")
    except SQLAlchemyError:
        log.exception("update profile failed: user=%s", user.id)
        return redirect_with(back, error="Failed to update profile")

    return redirect_with(back, success="Profile updated successfully")
