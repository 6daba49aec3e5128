"""Template setup and the redirect-with-notice helper shared by the HTML routers."""
from decimal import Decimal
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from app.core.constants import DAY_NAMES
from app.utils.tenant import format_tenant_name, get_initials

BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def money(value) -> str:
    if value is None:
        return ""
    return f"${Decimal(value):,.2f}"


def hhmm(value) -> str:
    return value.strftime("%H:%M") if value else ""


templates.env.filters["money"] = money
templates.env.filters["hhmm"] = hhmm
templates.env.filters["initials"] = get_initials
templates.env.filters["tenant_name"] = format_tenant_name
templates.env.globals["DAY_NAMES"] = DAY_NAMES


def notices(request: Request) -> dict:
    """One-shot notification carried on the query string"""
    return {
        "success": request.query_params.get("success"),
        "error": request.query_params.get("error"),
    }


def redirect_with(url: str, success: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    params = {}
    if success:
        params["success"] = success
    if error:
        params["error"] = error
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=303)


def first_error(exc: ValidationError) -> str:
    """Readable message for the first failing field of a form"""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    err = errors[0]
    field = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
    return f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid input")
