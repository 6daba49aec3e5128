from app.core.config import get_settings
from app.services.cdn import CloudinaryClient


def get_cdn_client() -> CloudinaryClient:
    return CloudinaryClient.from_settings(get_settings())
