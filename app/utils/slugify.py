# app/utils/slugify.py
import random
import re
import string
import time

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.tenant import slug_exists

_SLUG_ALPHABET = string.ascii_lowercase + string.digits
MAX_SLUG_ATTEMPTS = 10

# First path segments already taken by the app
RESERVED_SLUGS = {"admin", "api", "auth", "health", "realtime", "settings", "static"}


def generate_tenant_slug(name: str) -> str:
    if not name:
        return ""
    slug = name.lower().replace("'", "")
    slug = re.sub(r"[^a-z0-9\s]+", "", slug).strip()
    slug = re.sub(r"\s+", "-", slug)
    return slug.strip("-")


def _random_suffix(length: int = 4) -> str:
    return "".join(random.choice(_SLUG_ALPHABET) for _ in range(length))


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_SLUG_ALPHABET[rem])
    return "".join(reversed(digits)) or "0"


async def get_unique_tenant_slug(db: AsyncSession, restaurant_name: str) -> str:
    base = generate_tenant_slug(restaurant_name)
    candidate = base

    # base once, then random suffixes until free
    for _ in range(MAX_SLUG_ATTEMPTS):
        if candidate and candidate not in RESERVED_SLUGS and not await slug_exists(db, candidate):
            return candidate
        candidate = f"{base}-{_random_suffix()}"

    return f"{base}-{_base36(int(time.time() * 1000))}"
