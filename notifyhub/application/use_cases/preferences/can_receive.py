"""Use case gating deliveries by category consent and quiet hours."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from notifyhub.domain.entities import CATEGORY_ALERTS, CATEGORY_TRANSACTIONAL
from notifyhub.utils import clock_to_minutes, ensure_utc, now_utc, resolve_timezone

from .get_or_create_preferences import get_or_create_preferences
from .validators import ensure_category, ensure_user_id

FAIL_OPEN_CATEGORIES: frozenset[str] = frozenset({CATEGORY_TRANSACTIONAL, CATEGORY_ALERTS})

logger = logging.getLogger(__name__)


def can_receive(
    session: Session,
    user_id: str,
    category: str,
    *,
    now: datetime | None = None,
) -> bool:
    """Return whether ``user_id`` accepts a ``category`` message right now.

    The local time must satisfy ``start <= current <= end`` in minutes of the
    day, so overnight windows such as 22:00-08:00 never match. When the check
    itself fails, transactional and alert messages are allowed and every
    other category is refused.
    """

    ensure_category(category)
    user_id = ensure_user_id(user_id)
    try:
        preference = get_or_create_preferences(session, user_id)
        settings = preference.preferences
        if not settings.categories.allows(category):
            return False

        local_now = ensure_utc(now or now_utc()).astimezone(resolve_timezone(settings.timezone))
        current = local_now.hour * 60 + local_now.minute
        start = clock_to_minutes(settings.allowed_time_start)
        end = clock_to_minutes(settings.allowed_time_end)
        return start <= current <= end
    except Exception:
        logger.exception("Failed to evaluate preferences of user %s", user_id)
        return category in FAIL_OPEN_CATEGORIES
