import hashlib
import hmac

import pytest

from app.api.dependencies import get_cdn_client
from app.core.errors import CdnNotConfigured
from app.main import app
from app.services.cdn import CloudinaryClient, build_public_id, sign_params, string_to_sign

SECRET = "shh-its-a-secret"


def _client(secret=SECRET, mode="hmac"):
    return CloudinaryClient("demo", "1234", secret, signature_mode=mode)


def test_string_to_sign_is_sorted():
    assert string_to_sign({"timestamp": 1700000000, "public_id": "p"}) == "public_id=p&timestamp=1700000000"


def test_signature_is_hmac_sha1_and_deterministic():
    expected = hmac.new(SECRET.encode(), b"public_id=p&timestamp=t", hashlib.sha1).hexdigest()
    client = _client()
    assert client.sign({"public_id": "p", "timestamp": "t"}) == expected
    assert client.sign({"public_id": "p", "timestamp": "t"}) == expected


def test_digest_mode_matches_cdn_scheme():
    expected = hashlib.sha1(f"public_id=p&timestamp=t{SECRET}".encode()).hexdigest()
    assert sign_params({"public_id": "p", "timestamp": "t"}, SECRET, mode="digest") == expected


def test_sign_without_secret_raises():
    with pytest.raises(CdnNotConfigured):
        _client(secret=None).sign({"public_id": "p", "timestamp": "t"})


def test_build_public_id_cleans_folder():
    assert build_public_id("suya.jpg", "/menu-items//mama-put/", "ab12") == "menu-items/mama-put/ab12_suya"
    assert build_public_id("suya.jpg") == "suya"


async def test_sign_endpoint_returns_plain_signature(client):
    app.dependency_overrides[get_cdn_client] = _client
    response = await client.post(
        "/api/cloudinary/cloudinary-sign", json={"public_id": "p", "timestamp": "t"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == hmac.new(SECRET.encode(), b"public_id=p&timestamp=t", hashlib.sha1).hexdigest()


async def test_sign_endpoint_without_secret(client):
    app.dependency_overrides[get_cdn_client] = lambda: _client(secret=None)
    response = await client.post(
        "/api/cloudinary/cloudinary-sign", json={"public_id": "p", "timestamp": "t"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "API secret not configured"}


async def test_sign_endpoint_bad_input(client):
    app.dependency_overrides[get_cdn_client] = _client
    response = await client.post("/api/cloudinary/cloudinary-sign", json={"timestamp": "t"})

    assert response.status_code == 500
    assert response.json() == {"error": "Signature generation failed"}
