from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from app.core.errors import StorageNotConfigured
from app.services.uploads import UploadOptions, upload_file
from app.utils import spaces

CDN_BASE = "https://snackbite.nyc3.cdn.digitaloceanspaces.com"


class FakeBucket:
    def __init__(self):
        self.objects = {}
        self.clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def put_public_object(self, *, key, body, content_type):
        self.clock += timedelta(minutes=1)
        self.objects[key] = (body, content_type, self.clock)
        return key

    async def list_objects(self, *, prefix, limit=100):
        prefix = prefix.strip("/") + "/"
        found = [
            {"key": key, "last_modified": stamp, "size": len(body)}
            for key, (body, _, stamp) in self.objects.items()
            if key.startswith(prefix)
        ]
        found.sort(key=lambda o: o["last_modified"], reverse=True)
        return found[:limit]

    async def delete_object(self, *, key):
        self.objects.pop(key, None)


@pytest.fixture
def bucket(monkeypatch, settings):
    fake = FakeBucket()
    monkeypatch.setattr(settings, "spaces_cdn_base", CDN_BASE)
    monkeypatch.setattr(settings, "spaces_prefix", "test")
    monkeypatch.setattr(spaces, "put_public_object", fake.put_public_object)
    monkeypatch.setattr(spaces, "list_objects", fake.list_objects)
    monkeypatch.setattr(spaces, "delete_object", fake.delete_object)
    return fake


def notice(response, key):
    return parse_qs(urlparse(response.headers["location"]).query).get(key, [None])[0]


def test_object_keys_carry_environment_prefix(settings, monkeypatch):
    monkeypatch.setattr(settings, "spaces_prefix", "prod")
    monkeypatch.setattr(settings, "spaces_cdn_base", CDN_BASE)

    assert spaces.object_key("/screenshots/", "a.png") == "prod/screenshots/a.png"
    assert spaces.public_url("/prod/screenshots/a.png") == f"{CDN_BASE}/prod/screenshots/a.png"


async def test_bucket_needs_configuration(settings, monkeypatch):
    monkeypatch.setattr(settings, "spaces_key", None)

    with pytest.raises(StorageNotConfigured):
        await spaces.put_public_object(key="x", body=b"", content_type="image/png")


async def test_bucket_upload_returns_public_url(bucket):
    progress = []
    result = await upload_file(
        b"png-bytes",
        "avatar.png",
        "image/png",
        UploadOptions(target="bucket", folder="avatars/u1", public_id_prefix="ab12"),
        on_progress=progress.append,
    )

    assert result.public_id == "test/avatars/u1/ab12_avatar.png"
    assert result.url == f"{CDN_BASE}/test/avatars/u1/ab12_avatar.png"
    assert result.target == "bucket"
    assert progress == [0, 100]
    assert "test/avatars/u1/ab12_avatar.png" in bucket.objects


async def test_cdn_target_needs_a_client():
    with pytest.raises(ValueError):
        await upload_file(b"x", "a.png", "image/png", UploadOptions(target="cdn"))


async def test_screenshots_newest_first_and_cached(data, bucket):
    await data.screenshots.upload("first.png", b"1", "image/png")
    await data.screenshots.upload("../second.png", b"2", "image/png")

    shots = await data.screenshots.list()
    assert [s.name for s in shots] == ["second.png", "first.png"]
    assert shots[0].url == f"{CDN_BASE}/test/screenshots/second.png"

    bucket.objects.clear()
    assert len(await data.screenshots.list()) == 2

    await data.screenshots.remove("first.png")
    assert await data.screenshots.list() == []


async def test_landing_page_survives_missing_bucket(client, settings):
    response = await client.get("/")

    assert response.status_code == 200
    assert "Put your restaurant online" in response.text


async def test_privileged_screenshot_upload_and_delete(client, data, bucket, make_owner, sign_in, settings, monkeypatch):
    user, _ = await make_owner()
    monkeypatch.setattr(settings, "privileged_user_id", str(user.id))
    await sign_in(client, user)

    uploaded = await client.post(
        "/settings/screenshots-upload/upload",
        files={"file": ("dashboard.png", b"\x89PNG fake", "image/png")},
    )
    assert notice(uploaded, "success") == "Uploaded dashboard.png"

    page = await client.get("/settings/screenshots-upload")
    assert "dashboard.png" in page.text

    deleted = await client.post("/settings/screenshots-upload/delete", data={"name": "dashboard.png"})
    assert notice(deleted, "success") == "Deleted dashboard.png"
    assert bucket.objects == {}


async def test_avatar_upload_updates_profile(client, data, bucket, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.post(
        "/admin/mama-put/profile/update",
        data={"full_name": "Ada Obi"},
        files={"avatar": ("me.jpg", b"\xff\xd8 jpeg", "image/jpeg")},
    )

    assert notice(response, "success") == "Profile updated successfully"
    profile = await data.profile.get(user.id)
    assert profile.avatar_url.startswith(f"{CDN_BASE}/test/avatars/{user.id}/")
    assert profile.avatar_url.endswith(".jpg")


async def test_oversized_avatar_is_rejected(client, data, bucket, make_owner, sign_in, settings):
    user, _ = await make_owner()
    await sign_in(client, user)

    response = await client.post(
        "/admin/mama-put/profile/update",
        data={"full_name": "Ada Obi"},
        files={"avatar": ("me.png", b"0" * (2 * 1024 * 1024 + 1), "image/png")},
    )

    assert notice(response, "error") == "File too large (2MB max)."
    assert bucket.objects == {}
