from datetime import time
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.api.admin.promo_banner_routes import build_action_metadata
from app.api.admin.restaurant_info_routes import parse_additional
from app.api.dependencies import get_cdn_client
from app.core.constants import MenuCategory
from app.main import app
from app.schemas.menu_item import MenuItemCreate
from app.services.cdn import CloudinaryClient


def notice(response, key):
    return parse_qs(urlparse(response.headers["location"]).query).get(key, [None])[0]


@pytest.fixture
async def owner(client, make_owner, sign_in, settings):
    user, tenant = await make_owner()
    await sign_in(client, user)
    return user, tenant


@pytest.fixture
def cdn_uploads():
    """Route CDN uploads to a fake Cloudinary; returns the public ids it saw."""
    seen = []

    def handler(request: httpx.Request):
        body = request.read().decode(errors="ignore")
        public_id = body.split('name="public_id"\r\n\r\n', 1)[1].split("\r\n", 1)[0]
        seen.append(public_id)
        return httpx.Response(200, json={
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1/{public_id}.jpg",
            "public_id": public_id,
            "format": "jpg",
        })

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_cdn_client] = lambda: CloudinaryClient("demo", "1234", "secret", http=http)
    return seen


def test_build_action_metadata_drops_blanks():
    assert build_action_metadata(subject=" Order ", body="") == {"subject": "Order"}
    assert build_action_metadata() is None


def test_parse_additional():
    assert parse_additional("") is None
    assert parse_additional('{"delivery": true}') == {"delivery": True}
    with pytest.raises(ValueError):
        parse_additional("[1, 2]")


async def test_create_menu_item_from_form(client, data, owner):
    response = await client.post(
        "/admin/mama-put/menu-items/create",
        data={"name": "Suya Platter", "price": "2500", "category": "specials", "is_available": "on"},
    )

    assert response.status_code == 303
    assert notice(response, "success") == "Added Suya Platter"
    items = await data.menu_items.list("mama-put")
    assert [(i.name, i.price, i.is_available) for i in items] == [("Suya Platter", Decimal("2500"), True)]

    page = await client.get("/admin/mama-put/menu-items")
    assert "Suya Platter" in page.text


async def test_create_menu_item_with_bad_price(client, data, owner):
    response = await client.post(
        "/admin/mama-put/menu-items/create",
        data={"name": "Puff Puff", "price": "-1", "category": "snacks"},
    )

    assert response.status_code == 303
    assert notice(response, "error")
    assert await data.menu_items.list("mama-put") == []


async def test_menu_item_photo_goes_to_tenant_folder(client, data, owner, cdn_uploads):
    response = await client.post(
        "/admin/mama-put/menu-items/create",
        data={"name": "Chin Chin", "price": "3.50", "category": "snacks"},
        files={"photo": ("chin-chin.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
    )

    assert notice(response, "success") == "Added Chin Chin"
    assert len(cdn_uploads) == 1
    assert cdn_uploads[0].startswith("menu-items/mama-put/")
    assert cdn_uploads[0].endswith("_chin-chin")
    item = (await data.menu_items.list("mama-put"))[0]
    assert item.image_url.endswith(cdn_uploads[0] + ".jpg")


async def test_menu_item_rejects_non_image(client, data, owner, cdn_uploads):
    response = await client.post(
        "/admin/mama-put/menu-items/create",
        data={"name": "Menu", "price": "1", "category": "snacks"},
        files={"photo": ("menu.pdf", b"%PDF", "application/pdf")},
    )

    assert notice(response, "error").startswith("Invalid image type")
    assert cdn_uploads == []


async def test_toggle_and_delete_menu_item(client, data, owner):
    await client.post(
        "/admin/mama-put/menu-items/create",
        data={"name": "Zobo", "price": "1.5", "category": "drinks", "is_available": "on"},
    )
    item = (await data.menu_items.list("mama-put"))[0]

    toggled = await client.post(f"/admin/mama-put/menu-items/{item.id}/toggle")
    assert notice(toggled, "success") == "Zobo is now hidden"
    assert await data.menu_items.list_available("mama-put") == []

    deleted = await client.post(f"/admin/mama-put/menu-items/{item.id}/delete")
    assert notice(deleted, "success") == "Deleted Zobo"
    missing = await client.post(f"/admin/mama-put/menu-items/{item.id}/delete")
    assert notice(missing, "error") == "Menu item not found"



async def test_deleting_menu_item_removes_its_photo(client, data, owner):
    destroyed = []

    def handler(request: httpx.Request):
        destroyed.append(parse_qs(request.content.decode())["public_id"][0])
        return httpx.Response(200, json={"result": "ok"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_cdn_client] = lambda: CloudinaryClient("demo", "1234", "secret", http=http)
    item = await data.menu_items.create(
        "mama-put",
        MenuItemCreate(
            name="Suya",
            price=Decimal("2500"),
            category=MenuCategory.specials,
            image_url="https://res.cloudinary.com/demo/image/upload/v17/menu-items/mama-put/ab12_suya.jpg",
        ),
    )

    response = await client.post(f"/admin/mama-put/menu-items/{item.id}/delete")

    assert notice(response, "success") == "Deleted Suya"
    assert destroyed == ["menu-items/mama-put/ab12_suya"]


async def test_opening_hours_form(client, data, owner):
    first = await client.post(
        "/admin/mama-put/opening-hours/create",
        data={"day_of_week": "5", "open_time": "22:00", "close_time": "02:00"},
    )
    duplicate = await client.post(
        "/admin/mama-put/opening-hours/create",
        data={"day_of_week": "5", "open_time": "10:00", "close_time": "12:00"},
    )
    bad_day = await client.post(
        "/admin/mama-put/opening-hours/create",
        data={"day_of_week": "7", "open_time": "10:00", "close_time": "12:00"},
    )

    assert notice(first, "success") == "Opening hours added"
    assert notice(duplicate, "error") == "That day already has a slot with this number"
    assert notice(bad_day, "error")
    hours = await data.opening_hours.list("mama-put")
    assert [(h.day_of_week, h.open_time, h.close_time) for h in hours] == [(5, time(22, 0), time(2, 0))]

    page = await client.get("/admin/mama-put/opening-hours")
    assert page.status_code == 200
    assert "Saturday" in page.text


async def test_restaurant_info_form(client, data, owner):
    response = await client.post(
        "/admin/mama-put/restaurant-info/save",
        data={
            "restaurant_name": "Mama Put Kitchen",
            "hero_tagline": "Hot & fresh",
            "hero_description": "Lagos street food",
            "hero_image_urls": "https://img.example.com/a.jpg\n\nhttps://img.example.com/b.jpg",
            "about_paragraphs": "First paragraph.\n\nSecond paragraph.",
            "whatsapp": "+234 801 234 5678",
            "additional_json": '{"delivery": true}',
        },
    )

    assert notice(response, "success") == "Restaurant info saved"
    info = await data.restaurant_info.get("mama-put")
    assert info.restaurant_name == "Mama Put Kitchen"
    assert info.hero_section["imageUrls"] == ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"]
    assert info.about_section["paragraphs"] == ["First paragraph.", "Second paragraph."]
    assert info.additional == {"delivery": True}


async def test_restaurant_info_rejects_bad_json(client, data, owner):
    response = await client.post(
        "/admin/mama-put/restaurant-info/save",
        data={"hero_tagline": "t", "hero_description": "d", "additional_json": "{nope"},
    )

    assert notice(response, "error") == "Additional info is not valid JSON"
    assert await data.restaurant_info.get("mama-put") is None


async def test_promo_banner_form(client, data, owner):
    created = await client.post(
        "/admin/mama-put/promo-banners/create",
        data={
            "title": "Free delivery",
            "active": "on",
            "action_type": "email",
            "action_value": "orders@mamaput.ng",
            "action_subject": "Delivery",
        },
    )
    assert notice(created, "success") == 'Banner "Free delivery" created'

    banner = (await data.promo_banners.list("mama-put"))[0]
    assert banner.action_metadata == {"subject": "Delivery"}

    updated = await client.post(
        f"/admin/mama-put/promo-banners/{banner.id}/update",
        data={"title": "Free delivery today"},
    )
    assert notice(updated, "success") == 'Banner "Free delivery today" updated'
    assert await data.promo_banners.list_active("mama-put") == []

    deleted = await client.post(f"/admin/mama-put/promo-banners/{banner.id}/delete")
    assert notice(deleted, "success") == "Banner deleted"


async def test_media_delete(client, owner):
    def handler(request):
        return httpx.Response(200, json={"result": "not found"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    app.dependency_overrides[get_cdn_client] = lambda: CloudinaryClient("demo", "1234", "secret", http=http)

    response = await client.post("/admin/mama-put/media/delete", json={"public_id": "menu-items/mama-put/x"})

    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_profile_update_without_avatar(client, data, owner):
    user, _ = owner

    response = await client.post("/admin/mama-put/profile/update", data={"full_name": "Ada Obi-Ross"})

    assert notice(response, "success") == "Profile updated successfully"
    assert (await data.profile.get(user.id)).full_name == "Ada Obi-Ross"
