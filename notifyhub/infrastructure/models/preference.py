"""SQLAlchemy model for per-user contact preferences."""

from sqlalchemy import JSON, Column, DateTime, String

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_utc


class PreferenceModel(Base):
    __tablename__ = "preference"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(100), nullable=False, unique=True, index=True)
    channels = Column(JSON, nullable=False, default=dict)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)


__all__ = ["PreferenceModel"]
