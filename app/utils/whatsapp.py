import re
from typing import Iterable, Optional
from urllib.parse import quote


def generate_whatsapp_url(phone: Optional[str], message: str) -> Optional[str]:
    """wa.me link; WhatsApp wants digits only in the number"""
    if not phone:
        return None
    digits = re.sub(r"\D", "", phone)
    if not digits:
        return None
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def create_order_message(items: Iterable[dict], restaurant_name: str = "SnackBite") -> str:
    items = list(items)
    lines = [
        f"• {item['quantity']}x {item['name']} - ${float(item['price']) * item['quantity']:.2f}"
        for item in items
    ]
    total = sum(float(item["price"]) * item["quantity"] for item in items)
    details = "\n".join(lines)
    return (
        f"Hi! I'd like to place an order from {restaurant_name}:\n\n"
        f"{details}\n\n"
        f"Total: ${total:.2f}\n\n"
        "Please confirm availability and delivery details. Thank you!"
    )
