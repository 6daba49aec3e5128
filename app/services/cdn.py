"""
Cloudinary client.

Signing happens here, server-side; the API secret never leaves the process.
Uploads and destroys are posted straight to the Cloudinary REST API and are
always signed with the digest scheme, which is what the API verifies. The
configured signature mode only applies to signatures handed out by ``sign``.
"""
from __future__ import annotations

import hashlib
import hmac
import io
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import httpx

from app.core.config import Settings
from app.core.errors import CdnError, CdnNotConfigured

log = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"

ProgressCallback = Callable[[int], None]


def string_to_sign(params: dict[str, Any]) -> str:
    """public_id=p&timestamp=t (keys sorted, empty values skipped)"""
    return "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    )


def sign_params(params: dict[str, Any], secret: str, mode: str = "hmac") -> str:
    """
    Sign request parameters with the API secret.

    ``hmac``: HMAC-SHA1 keyed by the secret over the parameter string.
    ``digest``: SHA-1 of the parameter string followed by the secret, the
    scheme the Cloudinary API itself verifies.
    """
    payload = string_to_sign(params)
    if mode == "digest":
        return hashlib.sha1((payload + secret).encode()).hexdigest()
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha1).hexdigest()


def clean_folder(folder: Optional[str]) -> str:
    if not folder:
        return ""
    return re.sub(r"/{2,}", "/", folder.strip("/"))


def build_public_id(filename: str, folder: Optional[str] = None, prefix: Optional[str] = None) -> str:
    """'folder/prefix_basename' from an uploaded file name"""
    base_name = re.sub(r"\.[^/.]+$", "", filename)
    folder = clean_folder(folder)
    return (f"{folder}/" if folder else "") + (f"{prefix}_" if prefix else "") + base_name


class ProgressReader(io.BytesIO):
    """In-memory upload body that reports 0-100 progress as it is read."""

    def __init__(self, data: bytes, on_progress: Optional[ProgressCallback] = None):
        super().__init__(data)
        self.total = len(data)
        self.on_progress = on_progress
        self._last = -1

    def read(self, size: int = -1) -> bytes:
        chunk = super().read(size)
        if self.on_progress:
            percent = 100 if self.total == 0 else round(self.tell() / self.total * 100)
            if percent != self._last:
                self._last = percent
                self.on_progress(percent)
        return chunk


@dataclass
class CdnUploadResult:
    url: str
    public_id: str
    resource_type: Optional[str] = None
    format: Optional[str] = None
    bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    created_at: Optional[str] = None
    version: Optional[int] = None
    tags: list[str] = field(default_factory=list)
    is_duplicate: bool = False


@dataclass
class CdnDeleteResult:
    success: bool
    error: Optional[str] = None
    result: Optional[dict[str, Any]] = None


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return body.get("message") or default


class CloudinaryClient:
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        signature_mode: str = "hmac",
        upload_preset: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.cloud_name = (cloud_name or "").strip() or None
        self.api_key = api_key
        self.api_secret = api_secret
        self.signature_mode = signature_mode
        self.upload_preset = (upload_preset or "").strip() or None
        self._http = http

    @classmethod
    def from_settings(cls, settings: Settings, http: Optional[httpx.AsyncClient] = None) -> "CloudinaryClient":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            signature_mode=settings.cdn_signature_mode,
            upload_preset=settings.cloudinary_upload_preset,
            http=http,
        )

    # ---------- signing ----------
    def sign(self, params: dict[str, Any]) -> str:
        if not self.api_secret:
            raise CdnNotConfigured("API secret not configured")
        return sign_params(params, self.api_secret, self.signature_mode)

    def _signed_form(self, params: dict[str, Any]) -> dict[str, str]:
        """Form fields for a server-to-CDN call: params, api_key and a digest signature"""
        params = {key: value for key, value in params.items() if value is not None}
        form = {key: str(value) for key, value in params.items()}
        form["api_key"] = self.api_key
        form["signature"] = sign_params(params, self.api_secret, "digest")
        return form

    def _require_config(self) -> None:
        if not self.api_secret:
            raise CdnNotConfigured("API secret not configured")
        if not self.cloud_name or not self.api_key:
            raise CdnNotConfigured("Cloudinary cloud name / API key not configured")

    def _url(self, path: str) -> str:
        return f"{API_BASE}/{self.cloud_name}/{path}"

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        try:
            if self._http is not None:
                return await self._http.post(url, **kwargs)
            async with httpx.AsyncClient() as http:
                return await http.post(url, **kwargs)
        except httpx.HTTPError as exc:
            log.error("cdn request failed: %s %s", url, exc)
            raise CdnError("Network error or upload failed") from exc

    # ---------- upload ----------
    async def upload(
        self,
        data: bytes,
        filename: str,
        *,
        folder: Optional[str] = None,
        public_id_prefix: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CdnUploadResult:
        self._require_config()

        public_id = build_public_id(filename, folder, public_id_prefix)
        form = self._signed_form(
            {"public_id": public_id, "timestamp": int(time.time()), "upload_preset": self.upload_preset}
        )
        body = ProgressReader(data, on_progress)

        response = await self._post(
            self._url("upload"),
            data=form,
            files={"file": (filename, body)},
        )

        if not response.is_success:
            message = _error_message(response, "Upload failed")
            log.error("cdn upload rejected: public_id=%s status=%s msg=%s", public_id, response.status_code, message)
            raise CdnError(message, status_code=response.status_code)

        if on_progress:
            on_progress(100)

        payload = response.json()
        log.info("cdn upload: public_id=%s bytes=%s", payload.get("public_id"), payload.get("bytes"))
        return CdnUploadResult(
            url=payload.get("secure_url"),
            public_id=payload.get("public_id"),
            resource_type=payload.get("resource_type"),
            format=payload.get("format"),
            bytes=payload.get("bytes"),
            width=payload.get("width"),
            height=payload.get("height"),
            created_at=payload.get("created_at"),
            version=payload.get("version"),
            tags=payload.get("tags") or [],
            is_duplicate=bool(payload.get("existing")),
        )

    # ---------- destroy ----------
    async def destroy(self, public_id: str) -> CdnDeleteResult:
        """Delete an image; an already-missing asset counts as deleted."""
        self._require_config()

        form = self._signed_form({"public_id": public_id, "timestamp": int(time.time())})
        try:
            response = await self._post(self._url("image/destroy"), data=form)
        except CdnError as exc:
            return CdnDeleteResult(success=False, error=exc.message)

        if not response.is_success:
            return CdnDeleteResult(success=False, error=_error_message(response, "Deletion failed"))

        result = response.json()
        if result.get("result") in ("ok", "not found"):
            log.info("cdn destroy: public_id=%s result=%s", public_id, result.get("result"))
            return CdnDeleteResult(success=True, result=result)
        return CdnDeleteResult(success=False, error=_error_message(response, "Deletion failed"), result=result)

    # ---------- admin search ----------
    async def search(self, expression: str, max_results: int = 50) -> list[dict[str, Any]]:
        self._require_config()

        response = await self._post(
            self._url("resources/search"),
            json={"expression": expression, "max_results": max_results},
            auth=(self.api_key, self.api_secret),
        )
        if not response.is_success:
            raise CdnError(_error_message(response, "Search failed"), status_code=response.status_code)
        return response.json().get("resources") or []
