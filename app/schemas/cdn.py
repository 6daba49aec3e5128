from pydantic import BaseModel
from typing import Any, List, Optional


class SignRequest(BaseModel):
    public_id: str
    timestamp: int | str


class DuplicateCheckRequest(BaseModel):
    fileName: Optional[str] = None
    folderName: Optional[str] = None
    strictMode: bool = False


class DuplicateMatch(BaseModel):
    secure_url: Optional[str] = None
    public_id: str
    resource_type: Optional[str] = None
    format: Optional[str] = None
    bytes: Optional[int] = None
    created_at: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    exists: bool
    duplicateType: Optional[str] = None
    file: Optional[DuplicateMatch] = None
    allMatches: List[DuplicateMatch] = []
    message: Optional[str] = None
    error: Optional[str] = None


class DestroyRequest(BaseModel):
    public_id: str


class DestroyResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    result: Optional[dict[str, Any]] = None
