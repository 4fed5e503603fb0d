"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Column, DateTime, String

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_utc


class NotificationModel(Base):
    """Database representation of a single delivery attempt."""

    __tablename__ = "notification"

    id = Column(String(32), primary_key=True)
    recipient_type = Column(String(10), nullable=False)
    recipient_value = Column(String(320), nullable=False, index=True)
    channel = Column(String(20), nullable=False, index=True)
    provider = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, index=True)
    content = Column(JSON, nullable=False, default=dict)
    status_history = Column(JSON, nullable=False, default=list)
    options = Column(JSON, nullable=False, default=dict)
    scheduled_for = Column(DateTime(timezone=True), nullable=True, index=True)
    provider_response = Column(JSON, nullable=True)
    # ``metadata`` is reserved by the declarative base.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)


__all__ = ["NotificationModel"]
