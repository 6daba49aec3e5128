from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: Optional[str] = None
    session_secret: str = "snackbite-session-secret"  # 🔐 Replace in production

    # Auth (fastapi-users JWT in a cookie)
    auth_secret: str = "snackbite-super-secret-key"
    jwt_lifetime_seconds: int = 3600
    session_cookie_name: str = "snackbite_session"
    session_cookie_secure: bool = False

    # The one account allowed into the platform settings area
    privileged_user_id: Optional[str] = None
    default_tenant_slug: str = "snackbite"

    # Cloudinary
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_upload_preset: Optional[str] = None
    cdn_signature_mode: Literal["hmac", "digest"] = "hmac"

    # S3-compatible bucket (Spaces)
    spaces_key: Optional[str] = None
    spaces_secret: Optional[str] = None
    spaces_region: str = "nyc3"
    spaces_bucket: Optional[str] = None
    spaces_endpoint: Optional[str] = None  # e.g. https://nyc3.digitaloceanspaces.com
    spaces_cdn_base: Optional[str] = None  # e.g. https://<bucket>.nyc3.cdn.digitaloceanspaces.com
    spaces_prefix: str = "prod"

    query_stale_seconds: float = 30.0
    cors_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
