"""
Public storefront for one restaurant, addressed by its slug.

This router has a catch-all first path segment, so it must be included last.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.api.pages import redirect_with, templates, notices
from app.core.constants import MenuCategory
from app.core.errors import TenantNotFound
from app.data import DataLayer, get_data
from app.data.opening_hours import group_by_day
from app.utils.cart import Cart
from app.utils.icons import icon_for_banner
from app.utils.promo_actions import resolve_action
from app.utils.tenant import normalize_restaurant_name
from app.utils.whatsapp import create_order_message, generate_whatsapp_url

log = logging.getLogger(__name__)

router = APIRouter()

GREETING = "Hi! I'd like to know more about your menu and place an order. Thank you!"


def not_found(request: Request, slug: str):
    return templates.TemplateResponse(request, "404.html", {"slug": slug}, status_code=404)


def _group_by_category(items) -> list[tuple[MenuCategory, list]]:
    grouped = []
    for category in MenuCategory:
        in_category = [item for item in items if item.category == category]
        if in_category:
            grouped.append((category, in_category))
    return grouped


@router.get("/{tenant_slug}", response_class=HTMLResponse)
async def storefront(
    request: Request,
    tenant_slug: str,
    category: Optional[str] = None,
    data: DataLayer = Depends(get_data),
):
    try:
        info = await data.restaurant_info.get(tenant_slug)
        restaurant_name = await data.restaurant_info.get_name(tenant_slug)
        items = await data.menu_items.list_available(tenant_slug)
        hours = await data.opening_hours.list(tenant_slug)
        banners = await data.promo_banners.list_active(tenant_slug)
    except TenantNotFound:
        return not_found(request, tenant_slug)

    whatsapp_number = info.whatsapp if info else None
    promos = [
        {
            "banner": banner,
            "link": resolve_action(
                banner.action_type, banner.action_value, banner.action_metadata, whatsapp_number
            ),
            "icon": icon_for_banner(banner.icon, banner.button_text, banner.action_type),
        }
        for banner in banners
    ]

    active_category = category if category in {c.value for c in MenuCategory} else "all"
    visible = items if active_category == "all" else [i for i in items if i.category.value == active_category]

    cart = Cart.load(request.session, tenant_slug)

    return templates.TemplateResponse(
        request,
        "storefront.html",
        {
            "slug": tenant_slug,
            "info": info,
            "restaurant_name": restaurant_name,
            "brand": normalize_restaurant_name(restaurant_name),
            "featured": [i for i in items if i.is_featured],
            "menu": _group_by_category(visible),
            "categories": list(MenuCategory),
            "active_category": active_category,
            "days": group_by_day(hours),
            "promos": promos,
            "cart": cart,
            "whatsapp_url": generate_whatsapp_url(whatsapp_number, GREETING),
            **notices(request),
        },
    )


# ---------- Cart ----------
def _cart_redirect(tenant_slug: str, **notice) -> RedirectResponse:
    return redirect_with(f"/{tenant_slug}", **notice)


@router.post("/{tenant_slug}/cart/add")
async def cart_add(
    request: Request,
    tenant_slug: str,
    item_id: str = Form(...),
    quantity: int = Form(1),
    data: DataLayer = Depends(get_data),
):
    try:
        items = await data.menu_items.list_available(tenant_slug)
    except TenantNotFound:
        return not_found(request, tenant_slug)

    item = next((i for i in items if i.id == item_id), None)
    if not item:
        return _cart_redirect(tenant_slug, error="That item is no longer available.")

    cart = Cart.load(request.session, tenant_slug)
    cart.add_item(item, max(quantity, 1))
    cart.save(request.session, tenant_slug)
    return _cart_redirect(tenant_slug, success=f"{item.name} added to cart")


@router.post("/{tenant_slug}/cart/update")
async def cart_update(request: Request, tenant_slug: str, item_id: str = Form(...), quantity: int = Form(...)):
    cart = Cart.load(request.session, tenant_slug)
    cart.update_quantity(item_id, quantity)
    cart.save(request.session, tenant_slug)
    return _cart_redirect(tenant_slug)


@router.post("/{tenant_slug}/cart/remove")
async def cart_remove(request: Request, tenant_slug: str, item_id: str = Form(...)):
    cart = Cart.load(request.session, tenant_slug)
    cart.remove_item(item_id)
    cart.save(request.session, tenant_slug)
    return _cart_redirect(tenant_slug)


@router.post("/{tenant_slug}/cart/clear")
async def cart_clear(request: Request, tenant_slug: str):
    cart = Cart.load(request.session, tenant_slug)
    cart.clear()
    cart.save(request.session, tenant_slug)
    return _cart_redirect(tenant_slug, success="Cart cleared")


@router.post("/{tenant_slug}/cart/checkout")
async def cart_checkout(request: Request, tenant_slug: str, data: DataLayer = Depends(get_data)):
    cart = Cart.load(request.session, tenant_slug)
    if not cart.items:
        return _cart_redirect(tenant_slug, error="Your cart is empty.")

    try:
        info = await data.restaurant_info.get(tenant_slug)
        restaurant_name = await data.restaurant_info.get_name(tenant_slug)
    except TenantNotFound:
        return not_found(request, tenant_slug)

    url = generate_whatsapp_url(
        info.whatsapp if info else None,
        create_order_message(cart.lines(), restaurant_name),
    )
    if not url:
        return _cart_redirect(tenant_slug, error="This restaurant has no WhatsApp number yet.")

    log.info("checkout: tenant=%s items=%s", tenant_slug, cart.item_count)
    return RedirectResponse(url=url, status_code=303)
