"""Repository implementations for persistence."""

from .notification_repository import NotificationRepository
from .preference_repository import DuplicatePreferenceError, PreferenceRepository
from .template_repository import DuplicateTemplateError, TemplateRepository

__all__ = [
    "DuplicatePreferenceError",
    "DuplicateTemplateError",
    "NotificationRepository",
    "PreferenceRepository",
    "TemplateRepository",
]
