from sqlalchemy import Column, String, Integer, Boolean, Text, JSON, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.models.base import Base, utcnow
from app.core.constants import PromoActionType
import uuid


class PromoBanner(Base):
    __tablename__ = "promo_banners"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant = relationship("Tenant", back_populates="promo_banners")

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=False)
    background_color = Column(String, nullable=True)
    text_color = Column(String, nullable=True)

    # Call-to-action
    button_text = Column(String, nullable=True)
    icon = Column(String, nullable=True)  # kebab-case icon id, see app/utils/icons.py
    action_type = Column(
        Enum(
            PromoActionType,
            name="promo_action_type",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )
    action_value = Column(String, nullable=True)
    action_metadata = Column(JSON, nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
