from sqlalchemy import Column, String, Integer, Numeric, Boolean, DateTime, ForeignKey, Text, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from app.models.base import Base, utcnow
from app.core.constants import MenuCategory
import uuid

class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant = relationship("Tenant", back_populates="menu_items")

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(
        Enum(
            MenuCategory,
            name="menu_category",
            native_enum=False,
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    image_url = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
    )
