"""
Static icon registry.

Banner and section icons are stored as kebab-case ids ("shopping-cart").
Only ids listed here can be rendered; unknown ids resolve to None.
"""
import re
from typing import NamedTuple, Optional


class Icon(NamedTuple):
    id: str
    glyph: str
    label: str


ICON_REGISTRY = {
    "shopping-cart": Icon("shopping-cart", "🛒", "Shopping cart"),
    "shopping-bag": Icon("shopping-bag", "🛍️", "Shopping bag"),
    "message": Icon("message", "💬", "Message"),
    "message-circle": Icon("message-circle", "💬", "Message"),
    "phone": Icon("phone", "📞", "Phone"),
    "mail": Icon("mail", "✉️", "Mail"),
    "link": Icon("link", "🔗", "Link"),
    "external-link": Icon("external-link", "↗️", "External link"),
    "arrow-down": Icon("arrow-down", "⬇️", "Arrow down"),
    "download": Icon("download", "📥", "Download"),
    "gift": Icon("gift", "🎁", "Gift"),
    "tag": Icon("tag", "🏷️", "Tag"),
    "percent": Icon("percent", "💯", "Percent"),
    "star": Icon("star", "⭐", "Star"),
    "clock": Icon("clock", "🕒", "Clock"),
    "map-pin": Icon("map-pin", "📍", "Map pin"),
    "utensils": Icon("utensils", "🍴", "Utensils"),
    "pizza": Icon("pizza", "🍕", "Pizza"),
    "coffee": Icon("coffee", "☕", "Coffee"),
    "ice-cream": Icon("ice-cream", "🍦", "Ice cream"),
    "flame": Icon("flame", "🔥", "Flame"),
    "sparkles": Icon("sparkles", "✨", "Sparkles"),
    "snowflake": Icon("snowflake", "❄️", "Snowflake"),
    "mouse-pointer-click": Icon("mouse-pointer-click", "👆", "Click"),
}

# Button label -> icon id
ACTION_ICON_MAP = {
    # WhatsApp actions
    "order now": "shopping-cart",
    "chat now": "message",
}

DEFAULT_ACTION_ICONS = {
    "whatsapp": "message-circle",
    "email": "mail",
    "link": "external-link",
    "scroll": "arrow-down",
    "phone": "phone",
    "download": "download",
}


def to_icon_id(name: str) -> str:
    """'MousePointerClick' or 'mouse_pointer click' -> 'mouse-pointer-click'"""
    name = name.strip()
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", name)
    name = re.sub(r"[\s_]+", "-", name)
    return name.lower()


def get_dynamic_icon(name: Optional[str]) -> Optional[Icon]:
    if not name:
        return None
    return ICON_REGISTRY.get(to_icon_id(name))


def icon_for_banner(icon: Optional[str], button_text: Optional[str], action_type: Optional[str]) -> Optional[Icon]:
    """Explicit icon first, then the button label, then the action default"""
    found = get_dynamic_icon(icon)
    if found:
        return found
    if button_text:
        mapped = ACTION_ICON_MAP.get(button_text.strip().lower())
        if mapped:
            return ICON_REGISTRY[mapped]
    if action_type:
        action_type = getattr(action_type, "value", action_type)
        default = DEFAULT_ACTION_ICONS.get(action_type)
        if default:
            return ICON_REGISTRY[default]
    return None
