import logging
import aioboto3

from app.core.config import get_settings
from app.core.errors import StorageNotConfigured

log = logging.getLogger(__name__)

_session = aioboto3.Session()


def _require_config():
    settings = get_settings()
    if not all([
        settings.spaces_key,
        settings.spaces_secret,
        settings.spaces_bucket,
        settings.spaces_endpoint,
        settings.spaces_cdn_base,
    ]):
        raise StorageNotConfigured()
    return settings


def _client(settings):
    return _session.client(
        "s3",
        region_name=settings.spaces_region,
        endpoint_url=settings.spaces_endpoint,
        aws_access_key_id=settings.spaces_key,
        aws_secret_access_key=settings.spaces_secret,
    )


def object_key(*parts: str) -> str:
    """Prefix a key with the environment folder, e.g. prod/screenshots/a.png"""
    prefix = get_settings().spaces_prefix
    joined = "/".join(p.strip("/") for p in parts if p)
    return f"{prefix}/{joined}" if prefix else joined


def public_url(key: str) -> str:
    key = key.lstrip("/")
    return f"{get_settings().spaces_cdn_base}/{key}"


async def put_public_object(*, key: str, body: bytes, content_type: str) -> str:
    """
    Uploads a public-read object to Spaces and returns the object key.
    """
    settings = _require_config()

    key = key.lstrip("/")
    async with _client(settings) as s3:
        await s3.put_object(
            Bucket=settings.spaces_bucket,
            Key=key,
            Body=body,
            ContentType=content_type or "application/octet-stream",
            ACL="public-read",
        )
    log.info("spaces put: key=%s bytes=%s", key, len(body))
    return key


async def list_objects(*, prefix: str, limit: int = 100) -> list[dict]:
    """Objects under a prefix, newest first"""
    settings = _require_config()

    prefix = prefix.strip("/") + "/"
    async with _client(settings) as s3:
        response = await s3.list_objects_v2(
            Bucket=settings.spaces_bucket,
            Prefix=prefix,
            MaxKeys=1000,
        )
    objects = [
        {"key": obj["Key"], "last_modified": obj["LastModified"], "size": obj.get("Size")}
        for obj in response.get("Contents", [])
        if obj["Key"] != prefix
    ]
    objects.sort(key=lambda o: o["last_modified"], reverse=True)
    return objects[:limit]


async def delete_object(*, key: str) -> None:
    settings = _require_config()

    async with _client(settings) as s3:
        await s3.delete_object(Bucket=settings.spaces_bucket, Key=key.lstrip("/"))
    log.info("spaces delete: key=%s", key)
