from pydantic import BaseModel
from typing import Optional
import uuid


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileRead(BaseModel):
    id: uuid.UUID
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    tenant_id: Optional[int] = None

    class Config:
        from_attributes = True
