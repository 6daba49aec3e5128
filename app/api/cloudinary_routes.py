"""
Server-side helpers for browser uploads to Cloudinary.

The browser never sees the API secret: it asks for a signature here and
checks for duplicates before pushing bytes.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.dependencies import get_cdn_client
from app.core.errors import CdnNotConfigured
from app.services.cdn import CloudinaryClient
from app.services.duplicates import check_duplicate
from app.schemas.cdn import DuplicateCheckRequest, DuplicateCheckResponse, SignRequest

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cloudinary", tags=["cloudinary"])


@router.post("/cloudinary-sign")
async def cloudinary_sign(request: Request, cdn: CloudinaryClient = Depends(get_cdn_client)):
    if not cdn.api_secret:
        return JSONResponse(status_code=500, content={"error": "API secret not configured"})

    try:
        body = await request.json()
        sign_request = SignRequest.model_validate(body)
        signature = cdn.sign({"public_id": sign_request.public_id, "timestamp": sign_request.timestamp})
    except CdnNotConfigured:
        return JSONResponse(status_code=500, content={"error": "API secret not configured"})
    except ValueError as e:
        log.warning("signature generation failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "Signature generation failed"})

    return PlainTextResponse(signature)


@router.post("/check-duplicate", response_model=DuplicateCheckResponse)
async def cloudinary_check_duplicate(request: Request, cdn: CloudinaryClient = Depends(get_cdn_client)):
    try:
        check = DuplicateCheckRequest.model_validate(await request.json())
    except ValueError:
        check = DuplicateCheckRequest()
    if not check.fileName:
        return JSONResponse(status_code=400, content={"error": "fileName is required"})

    return await check_duplicate(
        cdn,
        check.fileName,
        folder_name=check.folderName,
        strict_mode=check.strictMode,
    )
