"""Use case returning the preferences of a user, creating defaults lazily."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Preference
from notifyhub.infrastructure.repositories import DuplicatePreferenceError, PreferenceRepository
from notifyhub.utils import now_utc

from .validators import ensure_user_id

logger = logging.getLogger(__name__)


def get_or_create_preferences(session: Session, user_id: str) -> Preference:
    """Return the stored preferences for ``user_id`` or persist the defaults.

    Two concurrent first accesses race on the unique ``user_id``; the loser
    re-reads the record created by the winner.
    """

    user_id = ensure_user_id(user_id)
    repository = PreferenceRepository(session)

    existing = repository.get_by_user_id(user_id)
    if existing is not None:
        return existing

    now = now_utc()
    try:
        created = repository.create(
            Preference(id=None, user_id=user_id, created_at=now, updated_at=now)
        )
    except DuplicatePreferenceError:
        logger.debug("Preferences for %s created concurrently, re-reading", user_id)
        existing = repository.get_by_user_id(user_id)
        if existing is None:
            raise
        return existing

    logger.info("Default preferences created for user %s", user_id)
    return created
