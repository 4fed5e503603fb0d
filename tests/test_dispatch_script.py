"""Tests for the scheduled dispatch command line entry point."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notifyhub.application.use_cases.notifications import NewNotificationData, send_notification
from notifyhub.domain.entities import LiteralContent, NotificationOptions, Recipient
from notifyhub.logging_config import configure_logging
from notifyhub.utils import now_utc
from scripts import dispatch_due_notifications as script


def test_main_dispatches_due_notifications(session, registry, monkeypatch, capsys):
    due_at = now_utc() + timedelta(minutes=30)
    scheduled = send_notification(
        session,
        registry,
        NewNotificationData(
            recipient=Recipient(type="email", value="ana@example.com"),
            channel="email",
            content=LiteralContent(subject="Reminder", text="Meeting soon"),
            options=NotificationOptions(scheduled_for=due_at),
        ),
    ).notification
    monkeypatch.setattr(script, "build_provider_registry", lambda settings: registry)
    closed = []
    monkeypatch.setattr(registry, "close", lambda: closed.append(True))

    script.main(["--now", (due_at + timedelta(minutes=1)).replace(tzinfo=None).isoformat()])

    output = capsys.readouterr().out
    assert "Dispatched 1 due notification(s)" in output
    assert f"{scheduled.id}: email via sendgrid -> sent" in output
    assert closed == [True]


def test_script_configures_logging_without_building_the_api():
    assert script.configure_logging is configure_logging
    assert not hasattr(script, "create_app")


def test_invalid_timestamp_is_rejected():
    with pytest.raises(SystemExit):
        script.parse_args(["--now", "yesterday"])
