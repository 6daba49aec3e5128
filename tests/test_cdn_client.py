import hashlib
import json
from urllib.parse import parse_qs

import httpx
import pytest

from app.api.dependencies import get_cdn_client
from app.core.errors import CdnError, CdnNotConfigured
from app.main import app
from app.services.cdn import CloudinaryClient
from app.services.duplicates import check_duplicate


def _client(handler, secret="secret"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CloudinaryClient("demo", "1234", secret, http=http)


async def test_upload_posts_signed_form_and_reports_progress():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(
            200,
            json={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/menu-items/mama-put/ab12_suya.jpg",
                "public_id": "menu-items/mama-put/ab12_suya",
                "format": "jpg",
                "bytes": 11,
                "width": 600,
                "height": 400,
            },
        )

    progress = []
    result = await _client(handler).upload(
        b"fake-jpeg!!",
        "suya.jpg",
        folder="menu-items/mama-put",
        public_id_prefix="ab12",
        on_progress=progress.append,
    )

    assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/upload"
    assert b"menu-items/mama-put/ab12_suya" in seen["body"]
    assert b'name="signature"' in seen["body"]
    assert result.url.endswith("ab12_suya.jpg")
    assert result.public_id == "menu-items/mama-put/ab12_suya"
    assert result.width == 600
    assert progress[-1] == 100
    assert progress == sorted(progress)


async def test_upload_error_carries_cdn_message():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "Invalid image file"}})

    with pytest.raises(CdnError) as exc:
        await _client(handler).upload(b"nope", "menu.txt")

    assert exc.value.message == "Invalid image file"
    assert exc.value.status_code == 400


async def test_upload_network_failure():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(CdnError) as exc:
        await _client(handler).upload(b"data", "suya.jpg")

    assert exc.value.message == "Network error or upload failed"


async def test_upload_requires_configuration():
    with pytest.raises(CdnNotConfigured):
        await CloudinaryClient(None, None, None).upload(b"data", "suya.jpg")


@pytest.mark.parametrize("outcome", ["ok", "not found"])
async def test_destroy_treats_missing_asset_as_success(outcome):
    def handler(request):
        assert request.url.path == "/v1_1/demo/image/destroy"
        return httpx.Response(200, json={"result": outcome})

    result = await _client(handler).destroy("menu-items/mama-put/gone")

    assert result.success is True
    assert result.result == {"result": outcome}


async def test_destroy_failure_is_reported():
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Invalid Signature"}})

    result = await _client(handler).destroy("menu-items/x")

    assert result.success is False
    assert result.error == "Invalid Signature"


def _field(body: bytes, name: str) -> str:
    marker = f'name="{name}"\r\n\r\n'.encode()
    return body.split(marker, 1)[1].split(b"\r\n", 1)[0].decode()


async def test_cdn_requests_use_digest_signature_whatever_the_mode():
    bodies = {}

    def handler(request: httpx.Request):
        bodies[request.url.path] = request.read()
        if request.url.path.endswith("/destroy"):
            return httpx.Response(200, json={"result": "ok"})
        return httpx.Response(200, json={"secure_url": "https://cdn/suya.jpg", "public_id": "menu/suya"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    cdn = CloudinaryClient("demo", "1234", "secret", signature_mode="hmac", upload_preset="menu", http=http)

    await cdn.upload(b"jpeg", "suya.jpg", folder="menu")
    await cdn.destroy("menu/suya")

    upload = bodies["/v1_1/demo/upload"]
    timestamp = _field(upload, "timestamp")
    assert _field(upload, "upload_preset") == "menu"
    assert _field(upload, "signature") == hashlib.sha1(
        f"public_id=menu/suya&timestamp={timestamp}&upload_preset=menusecret".encode()
    ).hexdigest()

    destroy = {k: v[0] for k, v in parse_qs(bodies["/v1_1/demo/image/destroy"].decode()).items()}
    assert destroy["api_key"] == "1234"
    assert destroy["signature"] == hashlib.sha1(
        f"public_id=menu/suya&timestamp={destroy['timestamp']}secret".encode()
    ).hexdigest()


def _search_handler(resources):
    def handler(request: httpx.Request):
        assert request.url.path == "/v1_1/demo/resources/search"
        body = json.loads(request.content)
        assert body["max_results"] == 50
        return httpx.Response(200, json={"resources": resources})

    return handler


async def test_duplicate_check_finds_exact_match():
    client = _client(_search_handler([
        {"public_id": "menu-items/suya", "format": "jpg", "secure_url": "https://cdn/suya.jpg"},
    ]))

    result = await check_duplicate(client, "Suya.jpg", "menu-items")

    assert result.exists is True
    assert result.duplicateType == "exact"
    assert result.file.public_id == "menu-items/suya"


async def test_duplicate_check_basename_match_and_strict_mode():
    client = _client(_search_handler([{"public_id": "menu-items/suya", "format": "png"}]))

    loose = await check_duplicate(client, "suya.jpg", "menu-items")
    strict = await check_duplicate(client, "suya.jpg", "menu-items", strict_mode=True)

    assert loose.exists is True
    assert loose.duplicateType == "basename"
    assert strict.exists is False


async def test_duplicate_check_search_failure_allows_upload():
    client = _client(lambda request: httpx.Response(500, json={"error": {"message": "down"}}))

    result = await check_duplicate(client, "suya.jpg")

    assert result.exists is False


async def test_check_duplicate_endpoint(client):
    app.dependency_overrides[get_cdn_client] = lambda: _client(_search_handler([]))

    missing = await client.post("/api/cloudinary/check-duplicate", json={"folderName": "x"})
    ok = await client.post("/api/cloudinary/check-duplicate", json={"fileName": "suya.jpg"})

    assert missing.status_code == 400
    assert ok.status_code == 200
    assert ok.json()["exists"] is False
