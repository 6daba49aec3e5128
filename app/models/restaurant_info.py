from sqlalchemy import Column, String, Integer, Text, JSON, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import Base, utcnow


class RestaurantInfo(Base):
    __tablename__ = "restaurant_info"

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, unique=True)
    tenant = relationship("Tenant", back_populates="restaurant_info")

    restaurant_name = Column(String, nullable=True)
    hero_section = Column(JSON, nullable=True)
    about_section = Column(JSON, nullable=True)
    menu_section = Column(JSON, nullable=True)

    google_maps_embed = Column(Text, nullable=True)
    whatsapp = Column(String, nullable=True)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    additional = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
