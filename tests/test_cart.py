from decimal import Decimal
from types import SimpleNamespace
from urllib.parse import parse_qs, unquote, urlparse

from app.core.constants import MenuCategory
from app.schemas.menu_item import MenuItemCreate
from app.schemas.restaurant_info import HeroSection, RestaurantInfoUpsert
from app.utils.cart import Cart
from app.utils.whatsapp import create_order_message, generate_whatsapp_url


def menu_item(item_id="a", name="Suya", price="2500"):
    return SimpleNamespace(id=item_id, name=name, price=Decimal(price), image_url=None)


def test_adding_twice_increments_quantity():
    cart = Cart()
    cart.add_item(menu_item())
    cart.add_item(menu_item(), quantity=2)

    assert cart.item_count == 3
    assert cart.total == Decimal("7500")


def test_quantity_zero_removes_line():
    cart = Cart()
    cart.add_item(menu_item("a"))
    cart.add_item(menu_item("b", "Zobo", "1.50"))

    cart.update_quantity("a", 0)
    cart.update_quantity("missing", 4)

    assert [line["name"] for line in cart.lines()] == ["Zobo"]
    assert cart.total == Decimal("1.50")


def test_carts_are_kept_per_restaurant():
    session = {}
    mama = Cart()
    mama.add_item(menu_item())
    mama.save(session, "mama-put")

    assert Cart.load(session, "suya-spot").items == {}
    assert Cart.load(session, "mama-put").item_count == 1

    emptied = Cart.load(session, "mama-put")
    emptied.clear()
    emptied.save(session, "mama-put")
    assert "mama-put" not in session["carts"]


def test_order_message_and_link():
    message = create_order_message(
        [{"name": "Suya", "price": "2500", "quantity": 2}], "Mama Put"
    )

    assert "• 2x Suya - $5000.00" in message
    assert "Total: $5000.00" in message
    assert generate_whatsapp_url("+234 (801) 234-5678", "hi") == "https://wa.me/2348012345678?text=hi"
    assert generate_whatsapp_url("", "hi") is None


async def test_unknown_restaurant_is_404(client):
    response = await client.get("/ghost-kitchen")

    assert response.status_code == 404


async def test_storefront_lists_available_items(client, data, make_owner):
    await make_owner()
    await data.menu_items.create(
        "mama-put", MenuItemCreate(name="Suya Platter", price=Decimal("2500"), category=MenuCategory.specials)
    )
    await data.menu_items.create(
        "mama-put",
        MenuItemCreate(name="Secret Stew", price=Decimal("10"), category=MenuCategory.specials, is_available=False),
    )

    response = await client.get("/mama-put")

    assert response.status_code == 200
    assert "Suya Platter" in response.text
    assert "$2,500.00" in response.text
    assert "Secret Stew" not in response.text


async def test_add_to_cart_and_checkout_on_whatsapp(client, data, make_owner):
    await make_owner()
    await data.restaurant_info.upsert(
        "mama-put",
        RestaurantInfoUpsert(
            hero_section=HeroSection(tagline="Hot", description="Fresh"),
            whatsapp="+234 801 234 5678",
        ),
    )
    item = await data.menu_items.create(
        "mama-put", MenuItemCreate(name="Suya Platter", price=Decimal("2500"), category=MenuCategory.specials)
    )

    added = await client.post("/mama-put/cart/add", data={"item_id": item.id, "quantity": "2"})
    assert added.status_code == 303
    assert parse_qs(urlparse(added.headers["location"]).query)["success"] == ["Suya Platter added to cart"]

    checkout = await client.post("/mama-put/cart/checkout")

    assert checkout.status_code == 303
    location = checkout.headers["location"]
    assert location.startswith("https://wa.me/2348012345678?text=")
    text = unquote(location.split("text=", 1)[1])
    assert "2x Suya Platter - $5000.00" in text
    assert "from Mama Put" in text


async def test_checkout_with_empty_cart(client, make_owner):
    await make_owner()

    response = await client.post("/mama-put/cart/checkout")

    assert parse_qs(urlparse(response.headers["location"]).query)["error"] == ["Your cart is empty."]


async def test_unavailable_item_is_not_added(client, make_owner):
    await make_owner()

    response = await client.post("/mama-put/cart/add", data={"item_id": "nope"})

    assert parse_qs(urlparse(response.headers["location"]).query)["error"] == [
        "That item is no longer available."
    ]
