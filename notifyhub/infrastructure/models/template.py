"""SQLAlchemy model for message templates."""

from sqlalchemy import JSON, Column, DateTime, String

from notifyhub.infrastructure.database import Base
from notifyhub.utils import now_utc


class TemplateModel(Base):
    """Database representation of a template and its channel versions."""

    __tablename__ = "template"

    id = Column(String(32), primary_key=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    display_name = Column(String(150), nullable=True)
    description = Column(String(500), nullable=True)
    category = Column(String(20), nullable=False, default="transactional", index=True)
    tags = Column(JSON, nullable=False, default=list)
    versions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)


__all__ = ["TemplateModel"]
