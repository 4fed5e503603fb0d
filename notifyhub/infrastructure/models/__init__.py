"""SQLAlchemy models for the notification service."""

from .notification import NotificationModel
from .preference import PreferenceModel
from .template import TemplateModel

__all__ = ["NotificationModel", "PreferenceModel", "TemplateModel"]
