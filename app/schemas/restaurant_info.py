from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional, List
from datetime import datetime


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------- Sections ----------
class HeroSection(BaseModel):
    tagline: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    imageUrls: List[str] = []


class AboutSection(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subtitle: Optional[str] = None
    established: Optional[str] = None
    happy_customers: Optional[str] = None
    paragraphs: List[str] = []
    imageUrls: List[str] = []

    blanks_to_none = field_validator(
        "title", "description", "subtitle", "established", "happy_customers", mode="before"
    )(_blank_to_none)

    @field_validator("paragraphs", mode="after")
    @classmethod
    def drop_empty_paragraphs(cls, value: List[str]) -> List[str]:
        return [p for p in value if p and p.strip()]


class MenuSection(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

    blanks_to_none = field_validator("title", "description", mode="before")(_blank_to_none)


# ---------- Restaurant Info ----------
class RestaurantInfoUpsert(BaseModel):
    restaurant_name: Optional[str] = None
    hero_section: Optional[HeroSection] = None
    about_section: Optional[AboutSection] = None
    menu_section: Optional[MenuSection] = None
    google_maps_embed: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    additional: Optional[dict[str, Any]] = None

    blanks_to_none = field_validator(
        "restaurant_name", "google_maps_embed", "whatsapp", "address", "phone", "email", mode="before"
    )(_blank_to_none)


class RestaurantInfoRead(BaseModel):
    id: int
    tenant_id: int
    restaurant_name: Optional[str] = None
    hero_section: Optional[dict[str, Any]] = None
    about_section: Optional[dict[str, Any]] = None
    menu_section: Optional[dict[str, Any]] = None
    google_maps_embed: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    additional: Optional[dict[str, Any]] = None
    updated_at: datetime

    class Config:
        from_attributes = True
