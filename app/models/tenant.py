# app/models/tenant.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from app.models.base import Base, utcnow

class Tenant(Base):
    __tablename__ = "tenants"
    id = Column(Integer, primary_key=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    restaurant_name = Column(String, nullable=False)
    owner_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Back-populated relationships
    profiles = relationship("Profile", back_populates="tenant")
    menu_items = relationship("MenuItem", back_populates="tenant", cascade="all, delete-orphan")
    opening_hours = relationship("OpeningHour", back_populates="tenant", cascade="all, delete-orphan")
    restaurant_info = relationship(
        "RestaurantInfo", back_populates="tenant", uselist=False, cascade="all, delete-orphan"
    )
    promo_banners = relationship("PromoBanner", back_populates="tenant", cascade="all, delete-orphan")
