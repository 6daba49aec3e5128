# app/utils/tenant.py
from typing import Optional


def format_tenant_name(slug: str) -> str:
    """'mama-put' -> 'Mama Put'"""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


def get_initials(name: Optional[str]) -> str:
    if not name:
        return "SB"
    words = [w for w in name.split(" ") if w]
    return "".join(w[0] for w in words[:2]).upper()


def normalize_restaurant_name(name: Optional[str]) -> str:
    if not name:
        return "SnackBite"
    return "".join(word[:1].upper() + word[1:] for word in name.lower().split(" "))
