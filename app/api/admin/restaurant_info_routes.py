import json
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.api.dependencies import get_cdn_client
from app.api.pages import first_error, notices, redirect_with, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin
from app.core.constants import UPLOAD_PATHS
from app.core.errors import CdnError, CdnNotConfigured, RecordNotFound
from app.data import DataLayer, get_data
from app.schemas.restaurant_info import AboutSection, HeroSection, MenuSection, RestaurantInfoUpsert
from app.services.cdn import CloudinaryClient
from app.services.uploads import UploadOptions, read_image, upload_file

log = logging.getLogger(__name__)

router = APIRouter()


def _lines(value: str) -> list[str]:
    return [line.strip() for line in value.splitlines() if line.strip()]


def _paragraphs(value: str) -> list[str]:
    # blank line separates paragraphs
    blocks = value.replace("\r\n", "\n").split("\n\n")
    return [block.strip() for block in blocks if block.strip()]


def parse_additional(value: str) -> Optional[dict]:
    """The free-form 'additional' field is edited as a JSON object"""
    if not value.strip():
        return None
    parsed = json.loads(value)
    if not isinstance(parsed, dict):
        raise ValueError("Additional info must be a JSON object")
    return parsed


async def _upload_images(files: list[UploadFile], folder: str, cdn: CloudinaryClient) -> list[str]:
    urls = []
    for upload in files or []:
        if not upload or not upload.filename:
            continue
        contents = await read_image(upload)
        result = await upload_file(
            contents,
            upload.filename,
            upload.content_type,
            UploadOptions(target="cdn", folder=folder, public_id_prefix=uuid.uuid4().hex[:8]),
            cdn=cdn,
        )
        urls.append(result.url)
    return urls


@router.get("/admin/{tenant_slug}/restaurant-info", response_class=HTMLResponse)
async def restaurant_info_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    info = await data.restaurant_info.get(tenant.slug)
    return templates.TemplateResponse(
        request,
        "admin/restaurant_info.html",
        {
            "tenant": tenant,
            "user": user,
            "info": info,
            "additional_json": json.dumps(info.additional, indent=2) if info and info.additional else "",
            **notices(request),
        },
    )


@router.post("/admin/{tenant_slug}/restaurant-info/save")
async def save_restaurant_info(
    restaurant_name: str = Form(""),
    hero_tagline: str = Form(""),
    hero_description: str = Form(""),
    hero_image_urls: str = Form(""),
    hero_images: list[UploadFile] = File(None),
    about_title: str = Form(""),
    about_subtitle: str = Form(""),
    about_description: str = Form(""),
    about_established: str = Form(""),
    about_happy_customers: str = Form(""),
    about_paragraphs: str = Form(""),
    about_image_urls: str = Form(""),
    about_images: list[UploadFile] = File(None),
    menu_title: str = Form(""),
    menu_description: str = Form(""),
    google_maps_embed: str = Form(""),
    whatsapp: str = Form(""),
    address: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    additional_json: str = Form(""),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
    cdn: CloudinaryClient = Depends(get_cdn_client),
):
    back = f"/admin/{tenant.slug}/restaurant-info"
    folder = f"{UPLOAD_PATHS['restaurant_info']}/{tenant.slug}"
    try:
        hero_urls = _lines(hero_image_urls) + await _upload_images(hero_images, f"{folder}/hero-images", cdn)
        about_urls = _lines(about_image_urls) + await _upload_images(about_images, f"{folder}/about-images", cdn)

        values = RestaurantInfoUpsert(
            restaurant_name=restaurant_name,
            hero_section=HeroSection(
                tagline=hero_tagline.strip(),
                description=hero_description.strip(),
                imageUrls=hero_urls,
            ),
            about_section=AboutSection(
                title=about_title,
                subtitle=about_subtitle,
                description=about_description,
                established=about_established,
                happy_customers=about_happy_customers,
                paragraphs=_paragraphs(about_paragraphs),
                imageUrls=about_urls,
            ),
            menu_section=MenuSection(title=menu_title, description=menu_description),
            google_maps_embed=google_maps_embed,
            whatsapp=whatsapp,
            address=address,
            phone=phone,
            email=email,
            additional=parse_additional(additional_json),
        )
        await data.restaurant_info.upsert(tenant.slug, values)
    except ValidationError as e:
        return redirect_with(back, error=first_error(e))
    except json.JSONDecodeError:
        return redirect_with(back, error="Additional info is not valid JSON")
    except ValueError as e:
        return redirect_with(back, error=str(e))
    except (CdnError, CdnNotConfigured) as e:
        log.warning("restaurant image upload failed: tenant=%s err=%s", tenant.slug, e)
        return redirect_with(back, error=f"Image upload failed: {e}")
    except SQLAlchemyError:
        log.exception("save restaurant info failed: tenant=%s", tenant.slug)
        return redirect_with(back, error="Could not save restaurant info")

    return redirect_with(back, success="Restaurant info saved")


@router.post("/admin/{tenant_slug}/restaurant-info/delete")
async def delete_restaurant_info(
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/restaurant-info"
    try:
        await data.restaurant_info.delete(tenant.slug)
    except RecordNotFound:
        return redirect_with(back, error="Nothing to delete yet")
    except SQLAlchemyError:
        log.exception("delete restaurant info failed: tenant=%s", tenant.slug)
        return redirect_with(back, error="Could not delete restaurant info")
    return redirect_with(back, success="Restaurant info deleted")
