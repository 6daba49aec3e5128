"""
Upload pipeline: pick a target (CDN or bucket), name the object, push the
bytes and hand back a public URL. Persisting the URL is the caller's job.
"""
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Literal, Optional

from fastapi import UploadFile

from app.services.cdn import CloudinaryClient, ProgressCallback, build_public_id
from app.utils import spaces

log = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


@dataclass
class UploadOptions:
    target: Literal["cdn", "bucket"] = "cdn"
    folder: Optional[str] = None
    public_id_prefix: Optional[str] = None


@dataclass
class UploadResult:
    url: str
    public_id: str
    target: str


async def read_image(upload: UploadFile, max_size: int = MAX_FILE_SIZE) -> bytes:
    """Validate extension and size of an uploaded image, return its bytes."""
    ext = os.path.splitext(upload.filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTS:
        raise ValueError("Invalid image type. Allowed: jpg, jpeg, png, webp, gif")

    contents = await upload.read()
    if len(contents) > max_size:
        raise ValueError(f"File too large ({max_size // (1024 * 1024)}MB max).")
    return contents


async def upload_file(
    data: bytes,
    filename: str,
    content_type: Optional[str],
    options: UploadOptions,
    cdn: Optional[CloudinaryClient] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> UploadResult:
    if options.target == "cdn":
        if cdn is None:
            raise ValueError("CDN upload requested without a CDN client")
        result = await cdn.upload(
            data,
            filename,
            folder=options.folder,
            public_id_prefix=options.public_id_prefix,
            on_progress=on_progress,
        )
        return UploadResult(url=result.url, public_id=result.public_id, target="cdn")

    ext = os.path.splitext(filename)[1].lower()
    # Bucket keys get a random prefix so re-uploads never overwrite
    prefix = options.public_id_prefix or uuid.uuid4().hex[:8]
    key = spaces.object_key(build_public_id(filename, options.folder, prefix) + ext)
    if on_progress:
        on_progress(0)
    await spaces.put_public_object(key=key, body=data, content_type=content_type)
    if on_progress:
        on_progress(100)
    log.info("bucket upload: key=%s", key)
    return UploadResult(url=spaces.public_url(key), public_id=key, target="bucket")
