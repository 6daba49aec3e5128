from sqlalchemy import Column, String, Integer, Time, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.models.base import Base, utcnow
import uuid


class OpeningHour(Base):
    __tablename__ = "opening_hours"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant = relationship("Tenant", back_populates="opening_hours")

    day_of_week = Column(Integer, nullable=False)  # 0 = Monday
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)
    slot_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "day_of_week", "slot_index", name="uq_opening_hours_tenant_day_slot"),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_opening_hours_day_of_week"),
    )
