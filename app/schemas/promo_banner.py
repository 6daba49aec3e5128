from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime, timezone

from app.core.constants import PromoActionType


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # datetime-local inputs arrive naive; treat them as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PromoBannerBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    active: bool = False
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    button_text: Optional[str] = None
    icon: Optional[str] = None
    action_type: Optional[PromoActionType] = None
    action_value: Optional[str] = None
    action_metadata: Optional[dict[str, Any]] = None
    expires_at: Optional[datetime] = None

    expires_at_utc = field_validator("expires_at", mode="after")(_as_utc)


class PromoBannerCreate(PromoBannerBase):
    pass


class PromoBannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    active: Optional[bool] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    button_text: Optional[str] = None
    icon: Optional[str] = None
    action_type: Optional[PromoActionType] = None
    action_value: Optional[str] = None
    action_metadata: Optional[dict[str, Any]] = None
    expires_at: Optional[datetime] = None

    expires_at_utc = field_validator("expires_at", mode="after")(_as_utc)


class PromoBannerRead(PromoBannerBase):
    id: str
    tenant_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
