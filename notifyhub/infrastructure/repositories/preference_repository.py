"""Persistence helpers for user contact preferences."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    CategoryPreferences,
    ChannelPreference,
    DeliveryPreferences,
    FrequencyCaps,
    Preference,
)
from notifyhub.infrastructure.models import PreferenceModel
from notifyhub.utils import ensure_utc, now_utc


class DuplicatePreferenceError(Exception):
    """Raised when a preference record already exists for the user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Preferences for user {user_id} already exist")
        self.user_id = user_id


class PreferenceRepository:
    """Provide CRUD operations for :class:`Preference` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user_id(self, user_id: str) -> Preference | None:
        model = (
            self.session.query(PreferenceModel)
            .filter(PreferenceModel.user_id == user_id)
            .first()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def create(self, preference: Preference) -> Preference:
        model = PreferenceModel()
        self._apply_entity_to_model(model, preference, include_creation_fields=True)
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicatePreferenceError(preference.user_id) from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, preference: Preference) -> Preference:
        model = (
            self.session.query(PreferenceModel)
            .filter(PreferenceModel.user_id == preference.user_id)
            .first()
        )
        if model is None:
            msg = f"Preferences for user {preference.user_id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, preference, include_creation_fields=False)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: PreferenceModel,
        preference: Preference,
        *,
        include_creation_fields: bool,
    ) -> None:
        now = now_utc()
        if include_creation_fields:
            model.id = preference.id or uuid4().hex
            model.user_id = preference.user_id
            model.created_at = ensure_utc(preference.created_at) or now
        model.channels = {
            name: asdict(entry) for name, entry in preference.channels.items()
        }
        model.preferences = asdict(preference.preferences)
        model.updated_at = now

    @staticmethod
    def _to_entity(model: PreferenceModel) -> Preference:
        return Preference(
            id=model.id,
            user_id=model.user_id,
            channels={
                name: ChannelPreference(**values)
                for name, values in (model.channels or {}).items()
            },
            preferences=_load_delivery_preferences(model.preferences or {}),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


def _load_delivery_preferences(payload: dict[str, Any]) -> DeliveryPreferences:
    values = dict(payload)
    values["categories"] = CategoryPreferences(**(values.get("categories") or {}))
    values["frequency"] = FrequencyCaps(**(values.get("frequency") or {}))
    return DeliveryPreferences(**values)


__all__ = ["DuplicatePreferenceError", "PreferenceRepository"]
