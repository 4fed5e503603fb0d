"""Notification dispatch use cases."""

from .cancel_notification import cancel_notification
from .get_notification import get_notification
from .get_notification_status import NotificationStatusReport, get_notification_status
from .list_notifications import list_notifications
from .process_notification import (
    FALLBACK_NOTIFICATION_KEY,
    IS_FALLBACK_KEY,
    ORIGINAL_NOTIFICATION_KEY,
    DispatchResult,
    build_message_content,
    process_notification,
)
from .send_notification import NewNotificationData, normalize_recipient, send_notification
from .trigger_scheduled import dispatch_due_notifications, trigger_scheduled_notification
from .update_notification_status import update_notification_status

__all__ = [
    "FALLBACK_NOTIFICATION_KEY",
    "IS_FALLBACK_KEY",
    "ORIGINAL_NOTIFICATION_KEY",
    "DispatchResult",
    "NewNotificationData",
    "NotificationStatusReport",
    "build_message_content",
    "cancel_notification",
    "dispatch_due_notifications",
    "get_notification",
    "get_notification_status",
    "list_notifications",
    "normalize_recipient",
    "process_notification",
    "send_notification",
    "trigger_scheduled_notification",
    "update_notification_status",
]
