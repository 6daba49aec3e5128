# app/utils/cdn_names.py
import logging
import re
from typing import Optional

log = logging.getLogger(__name__)


def get_strict_comparable_name(file_name: str) -> str:
    """Basename without extension, lower-cased, odd characters removed"""
    name_without_ext = ".".join(file_name.split(".")[:-1])
    return re.sub(r"[^a-zA-Z0-9\-_()\s]", "", name_without_ext).lower()


def get_loose_comparable_name(full_public_id_or_file_name: str) -> str:
    base_name = get_strict_comparable_name(full_public_id_or_file_name)

    # "name_name" (doubled by the CDN) -> "name"
    parts = base_name.split("_")
    if len(parts) == 2 and parts[0] == parts[1]:
        base_name = parts[0]

    normalized = base_name.lower().replace("_", "-").replace("(", "").replace(")", "")
    normalized = re.sub(r"[^a-z0-9\s-]", "", normalized)
    normalized = re.sub(r"-+", "-", normalized)
    normalized = re.sub(r"^-|-$", "", normalized)
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized.strip()


def get_base_name_from_public_id(public_id: str, fmt: Optional[str]) -> str:
    filename = public_id.split("/")[-1]
    if "." not in filename and fmt:
        return f"{filename}.{fmt}"
    return filename


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """
    https://res.cloudinary.com/<cloud>/image/upload/v123/folder/name.jpg -> folder/name
    """
    if not url or not isinstance(url, str) or not url.strip():
        log.info("Invalid or empty URL for public id extraction")
        return None

    parts = url.split("/")
    if "upload" not in parts:
        log.info("Could not extract public id from %s", url)
        return None

    upload_index = parts.index("upload")
    public_id_parts = parts[upload_index + 1:]
    if not public_id_parts:
        return None
    if re.fullmatch(r"v\d+", public_id_parts[0]):
        public_id_parts = public_id_parts[1:]

    full = "/".join(public_id_parts)
    if not full:
        return None
    last_dot = full.rfind(".")
    return full[:last_dot] if last_dot != -1 else full
