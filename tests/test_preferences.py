"""Tests for preference management and delivery gating."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from notifyhub.application.use_cases.preferences import (
    OPT_IN,
    OPT_OUT,
    can_receive,
    get_or_create_preferences,
    opt_in_out,
    preferred_channel,
    update_channel_preference,
    update_preferences,
    verify_channel,
)
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import PreferenceRepository


def _utc(hour, minute=0, day=1):
    return datetime(2024, 6, day, hour, minute, tzinfo=timezone.utc)


def test_defaults_are_created_on_first_access(session):
    preference = get_or_create_preferences(session, "user-1")

    assert preference.id is not None
    assert set(preference.channels) == {"sms", "email", "whatsapp"}
    assert all(not entry.enabled for entry in preference.channels.values())
    assert preference.channels["sms"].priority == 2
    assert preference.preferences.allowed_time_start == "08:00"
    assert preference.preferences.allowed_time_end == "22:00"
    assert preference.preferences.timezone == "America/Sao_Paulo"
    assert preference.preferences.categories.marketing is False
    assert preference.preferences.frequency.max_per_week == 20

    again = get_or_create_preferences(session, "user-1")
    assert again.id == preference.id


def test_concurrent_creation_returns_the_existing_record(session, monkeypatch):
    existing = get_or_create_preferences(session, "user-1")
    original_lookup = PreferenceRepository.get_by_user_id
    calls = []

    def stale_lookup(self, user_id):
        calls.append(user_id)
        if len(calls) == 1:
            return None
        return original_lookup(self, user_id)

    monkeypatch.setattr(PreferenceRepository, "get_by_user_id", stale_lookup)

    preference = get_or_create_preferences(session, "user-1")

    assert preference.id == existing.id
    assert calls == ["user-1", "user-1"]


def test_blank_user_id_is_rejected(session):
    with pytest.raises(ValidationError):
        get_or_create_preferences(session, "  ")


def test_update_preferences_merges_changes(session):
    updated = update_preferences(
        session,
        "user-1",
        channels={"email": {"value": " Ana@Example.com ", "enabled": True}},
        preferences={"timezone": "UTC", "categories": {"marketing": True}},
    )

    email = updated.channels["email"]
    assert email.value == "ana@example.com"
    assert email.enabled is True
    assert email.verified is False
    assert updated.preferences.timezone == "UTC"
    assert updated.preferences.categories.marketing is True
    assert updated.preferences.categories.transactional is True
    assert updated.preferences.allowed_time_start == "08:00"


@pytest.mark.parametrize(
    "preferences",
    [
        {"allowed_time_start": "25:00"},
        {"allowed_time_start": 8},
        {"allowed_time_end": None},
        {"timezone": "Nowhere/Unknown"},
        {"timezone": 3},
        {"categories": {"newsletters": True}},
        {"frequency": {"max_per_day": -1}},
        {"colour": "blue"},
    ],
)
def test_update_preferences_rejects_invalid_values(session, preferences):
    with pytest.raises(ValidationError):
        update_preferences(session, "user-1", preferences=preferences)


def test_new_channel_value_resets_verification(session):
    update_channel_preference(session, "user-1", "sms", value="11987654321")
    verified = verify_channel(session, "user-1", "sms")
    assert verified.channels["sms"].verified is True
    assert verified.channels["sms"].value == "+5511987654321"

    unchanged = update_channel_preference(session, "user-1", "sms", value="+5511987654321")
    assert unchanged.channels["sms"].verified is True

    changed = update_channel_preference(session, "user-1", "sms", value="11900000000")
    assert changed.channels["sms"].verified is False


def test_opt_in_and_out(session):
    opted_in = opt_in_out(session, "user-1", "whatsapp", OPT_IN, value="11987654321")
    assert opted_in.channels["whatsapp"].enabled is True
    assert opted_in.channels["whatsapp"].value == "+5511987654321"

    opted_out = opt_in_out(session, "user-1", "whatsapp", OPT_OUT)
    assert opted_out.channels["whatsapp"].enabled is False
    assert opted_out.channels["whatsapp"].value == "+5511987654321"


def test_opt_in_out_rejects_unknown_action(session):
    with pytest.raises(ValidationError):
        opt_in_out(session, "user-1", "sms", "subscribe")


def test_verify_channel_requires_a_value(session):
    with pytest.raises(ValidationError):
        verify_channel(session, "user-1", "email")


def test_preferred_channel_picks_lowest_priority_usable_channel(session):
    assert preferred_channel(session, "user-1") is None

    update_preferences(
        session,
        "user-1",
        channels={
            "sms": {"value": "+5511987654321", "enabled": True, "verified": True},
            "email": {"value": "ana@example.com", "enabled": True, "verified": True},
            "whatsapp": {"value": "+5511987654321", "enabled": True, "verified": False},
        },
    )

    chosen = preferred_channel(session, "user-1")
    assert chosen.channel == "email"
    assert chosen.value == "ana@example.com"


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (_utc(10, 59), False),
        (_utc(11, 0), True),
        (_utc(18, 30), True),
        (_utc(1, 0, day=2), True),
        (_utc(1, 1, day=2), False),
    ],
)
def test_can_receive_respects_quiet_hours(session, moment, expected):
    assert can_receive(session, "user-1", "transactional", now=moment) is expected


def test_can_receive_honours_category_consent(session):
    assert can_receive(session, "user-1", "marketing", now=_utc(15)) is False

    update_preferences(session, "user-1", preferences={"categories": {"marketing": True}})

    assert can_receive(session, "user-1", "marketing", now=_utc(15)) is True


def test_can_receive_overnight_window_never_matches(session):
    update_preferences(
        session,
        "user-1",
        preferences={"allowed_time_start": "22:00", "allowed_time_end": "08:00", "timezone": "UTC"},
    )

    assert can_receive(session, "user-1", "alerts", now=_utc(23)) is False
    assert can_receive(session, "user-1", "alerts", now=_utc(3)) is False


def test_can_receive_fails_open_for_critical_categories(session):
    repository = PreferenceRepository(session)
    preference = get_or_create_preferences(session, "user-1")
    preference.preferences.timezone = "Nowhere/Unknown"
    preference.preferences.categories.marketing = True
    repository.update(preference)

    assert can_receive(session, "user-1", "transactional", now=_utc(15)) is True
    assert can_receive(session, "user-1", "alerts", now=_utc(15)) is True
    assert can_receive(session, "user-1", "marketing", now=_utc(15)) is False


def test_can_receive_rejects_unknown_category(session):
    with pytest.raises(ValidationError):
        can_receive(session, "user-1", "newsletter")
