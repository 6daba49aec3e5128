# app/core/errors.py
from typing import Optional


class TenantNotFound(Exception):
    """No tenant row matches the slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Tenant not found: {slug!r}")


class RecordNotFound(Exception):
    def __init__(self, resource: str, record_id):
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} not found: {record_id}")


class CdnNotConfigured(Exception):
    def __init__(self, message: str = "API secret not configured"):
        super().__init__(message)


class CdnError(Exception):
    """The CDN rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StorageNotConfigured(Exception):
    def __init__(self, message: str = "Spaces env vars not fully configured"):
        super().__init__(message)
