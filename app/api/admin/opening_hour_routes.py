import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.api.pages import first_error, notices, redirect_with, templates
from app.auth.dependencies import get_current_user, get_tenant_for_admin
from app.core.errors import RecordNotFound
from app.data import DataLayer, get_data
from app.data.opening_hours import group_by_day
from app.schemas.opening_hour import OpeningHourCreate, OpeningHourUpdate

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/admin/{tenant_slug}/opening-hours", response_class=HTMLResponse)
async def opening_hours_page(
    request: Request,
    tenant=Depends(get_tenant_for_admin),
    user=Depends(get_current_user),
    data: DataLayer = Depends(get_data),
):
    hours = await data.opening_hours.list(tenant.slug)
    return templates.TemplateResponse(
        request,
        "admin/opening_hours.html",
        {"tenant": tenant, "user": user, "days": group_by_day(hours), **notices(request)},
    )


@router.post("/admin/{tenant_slug}/opening-hours/create")
async def create_opening_hour(
    day_of_week: int = Form(...),
    open_time: str = Form(...),
    close_time: str = Form(...),
    slot_index: int = Form(0),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/opening-hours"
    try:
        # close before open is allowed (overnight slots)
        hour = OpeningHourCreate(
            day_of_week=day_of_week,
            open_time=open_time,
            close_time=close_time,
            slot_index=slot_index,
        )
        await data.opening_hours.create(tenant.slug, hour)
    except ValidationError as e:
        return redirect_with(back, error=first_error(e))
    except IntegrityError:
        return redirect_with(back, error="That day already has a slot with this number")
    except SQLAlchemyError:
        log.exception("create opening hour failed: tenant=%s", tenant.slug)
        return redirect_with(back, error="Could not save opening hours")
    return redirect_with(back, success="Opening hours added")


@router.post("/admin/{tenant_slug}/opening-hours/{hour_id}/update")
async def update_opening_hour(
    hour_id: str,
    open_time: str = Form(...),
    close_time: str = Form(...),
    slot_index: int = Form(0),
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/opening-hours"
    try:
        updates = OpeningHourUpdate(open_time=open_time, close_time=close_time, slot_index=slot_index)
        await data.opening_hours.update(tenant.slug, hour_id, updates)
    except RecordNotFound:
        return redirect_with(back, error="Opening hour not found")
    except ValidationError as e:
        return redirect_with(back, error=first_error(e))
    except IntegrityError:
        return redirect_with(back, error="That day already has a slot with this number")
    except SQLAlchemyError:
        log.exception("update opening hour failed: tenant=%s id=%s", tenant.slug, hour_id)
        return redirect_with(back, error="Could not save opening hours")
    return redirect_with(back, success="Opening hours updated")


@router.post("/admin/{tenant_slug}/opening-hours/{hour_id}/delete")
async def delete_opening_hour(
    hour_id: str,
    tenant=Depends(get_tenant_for_admin),
    data: DataLayer = Depends(get_data),
):
    back = f"/admin/{tenant.slug}/opening-hours"
    try:
        await data.opening_hours.delete(tenant.slug, hour_id)
    except RecordNotFound:
        return redirect_with(back, error="Opening hour not found")
    except SQLAlchemyError:
        log.exception("delete opening hour failed: tenant=%s id=%s", tenant.slug, hour_id)
        return redirect_with(back, error="Could not delete opening hours")
    return redirect_with(back, success="Opening hours removed")
