# app/utils/promo_actions.py
import logging
from typing import Any, NamedTuple, Optional
from urllib.parse import urlencode, quote

from app.utils.whatsapp import generate_whatsapp_url

log = logging.getLogger(__name__)


class ActionLink(NamedTuple):
    href: str
    target: Optional[str] = None
    download: Optional[str] = None


def resolve_action(
    action_type: Optional[str],
    value: Optional[str],
    metadata: Optional[dict[str, Any]] = None,
    whatsapp_number: Optional[str] = None,
) -> Optional[ActionLink]:
    """
    Turn a banner's action descriptor into a link the page can render.

    `value` is the primary target for the type (message, email address, url,
    element id, phone number or download url); `metadata` carries the extras
    (subject/body, target, filename).
    """
    if not action_type:
        return None
    action_type = getattr(action_type, "value", action_type)
    metadata = metadata or {}

    if action_type == "whatsapp":
        message = value or metadata.get("message")
        if not message:
            return None
        url = generate_whatsapp_url(whatsapp_number, message)
        return ActionLink(url, target="_blank") if url else None

    if action_type == "email":
        params = {}
        if metadata.get("subject"):
            params["subject"] = metadata["subject"]
        if metadata.get("body"):
            params["body"] = metadata["body"]
        query = urlencode(params, quote_via=quote)
        return ActionLink(f"mailto:{value or ''}" + (f"?{query}" if query else ""))

    if action_type == "link":
        if not value:
            return None
        return ActionLink(value, target=metadata.get("target") or "_blank")

    if action_type == "scroll":
        if not value:
            return None
        return ActionLink(f"#{value.lstrip('#')}")

    if action_type == "phone":
        if not value:
            return None
        return ActionLink(f"tel:{value}")

    if action_type == "download":
        if not value:
            return None
        return ActionLink(value, download=metadata.get("filename") or "download")

    log.warning("Unknown action type: %s", action_type)
    return None
