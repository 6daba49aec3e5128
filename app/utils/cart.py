"""
Storefront cart.

The cart is plain state owned by the browser session: one cart per tenant
slug, stored under ``request.session["carts"][slug]`` as JSON-safe dicts.
"""
from decimal import Decimal
from typing import Any, MutableMapping, Optional

SESSION_KEY = "carts"


class Cart:
    def __init__(self, items: Optional[dict[str, dict[str, Any]]] = None):
        self.items: dict[str, dict[str, Any]] = items or {}

    @classmethod
    def load(cls, session: MutableMapping, tenant_slug: str) -> "Cart":
        carts = session.get(SESSION_KEY) or {}
        raw = carts.get(tenant_slug) or {}
        return cls({item_id: dict(item) for item_id, item in raw.items()})

    def save(self, session: MutableMapping, tenant_slug: str) -> None:
        carts = dict(session.get(SESSION_KEY) or {})
        if self.items:
            carts[tenant_slug] = self.items
        else:
            carts.pop(tenant_slug, None)
        session[SESSION_KEY] = carts

    def add_item(self, menu_item, quantity: int = 1) -> None:
        item_id = str(menu_item.id)
        existing = self.items.get(item_id)
        if existing:
            existing["quantity"] += quantity
            return
        self.items[item_id] = {
            "id": item_id,
            "name": menu_item.name,
            "price": str(Decimal(menu_item.price)),
            "image_url": menu_item.image_url,
            "quantity": quantity,
        }

    def remove_item(self, item_id: str) -> None:
        self.items.pop(item_id, None)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return
        if item_id in self.items:
            self.items[item_id]["quantity"] = quantity

    def clear(self) -> None:
        self.items = {}

    @property
    def total(self) -> Decimal:
        return sum(
            (Decimal(item["price"]) * item["quantity"] for item in self.items.values()),
            Decimal("0"),
        )

    @property
    def item_count(self) -> int:
        return sum(item["quantity"] for item in self.items.values())

    def lines(self) -> list[dict[str, Any]]:
        return list(self.items.values())
