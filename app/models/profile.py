from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from app.models.base import Base, utcnow


class Profile(Base):
    """One-to-one with an auth account; links the account to its tenant."""
    __tablename__ = "profiles"

    id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)

    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True)
    tenant = relationship("Tenant", back_populates="profiles")
    user = relationship("User", back_populates="profile")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
