import logging
from typing import Optional

from app.core.errors import CdnError, CdnNotConfigured
from app.schemas.cdn import DuplicateCheckResponse, DuplicateMatch
from app.services.cdn import CloudinaryClient
from app.utils.cdn_names import (
    get_base_name_from_public_id,
    get_loose_comparable_name,
    get_strict_comparable_name,
)

log = logging.getLogger(__name__)


def _match(resource: dict) -> DuplicateMatch:
    return DuplicateMatch(
        secure_url=resource.get("secure_url"),
        public_id=resource["public_id"],
        resource_type=resource.get("resource_type"),
        format=resource.get("format"),
        bytes=resource.get("bytes"),
        created_at=resource.get("created_at"),
    )


async def check_duplicate(
    client: CloudinaryClient,
    file_name: str,
    folder_name: Optional[str] = None,
    strict_mode: bool = False,
) -> DuplicateCheckResponse:
    """
    Look for an already-uploaded asset with the same name.

    "exact": same comparable name and same extension.
    "basename": same loose name, different extension.
    A failing search never blocks an upload; it reports no duplicate.
    """
    extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    strict_name = get_strict_comparable_name(file_name)
    loose_name = get_loose_comparable_name(file_name)

    expression = (
        f"folder:{folder_name} AND filename:{loose_name}*"
        if folder_name
        else f"filename:{loose_name}*"
    )
    log.info("duplicate check: file=%s expression=%s strict=%s", file_name, expression, strict_mode)

    try:
        resources = await client.search(expression, max_results=50)
    except (CdnError, CdnNotConfigured) as exc:
        log.warning("duplicate check search failed, allowing upload: %s", exc)
        return DuplicateCheckResponse(exists=False)

    exact, base_name = [], []
    for resource in resources:
        resource_file = get_base_name_from_public_id(resource["public_id"], resource.get("format"))
        resource_ext = (resource.get("format") or "").lower()
        resource_strict = get_strict_comparable_name(resource_file)
        resource_loose = get_loose_comparable_name(resource_file)

        if (resource_strict == strict_name or resource_loose == loose_name) and resource_ext == extension:
            exact.append(resource)
        elif resource_loose == loose_name and resource_ext != extension:
            base_name.append(resource)

    if exact:
        primary = exact[0]
        stored = f"{primary['public_id'].split('/')[-1]}.{primary.get('format')}"
        return DuplicateCheckResponse(
            exists=True,
            duplicateType="exact",
            file=_match(primary),
            allMatches=[_match(r) for r in exact],
            message=f'File "{file_name}" already exists (uploaded as "{stored}")',
        )

    if base_name and not strict_mode:
        formats = ", ".join(r.get("format") or "" for r in base_name)
        return DuplicateCheckResponse(
            exists=True,
            duplicateType="basename",
            file=_match(base_name[0]),
            allMatches=[_match(r) for r in base_name],
            message=f'Files with similar name "{strict_name}" exist with different extensions: {formats}',
        )

    return DuplicateCheckResponse(exists=False)
