"""Tests for notification listing and pagination."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notifyhub.application.use_cases.notifications import (
    NewNotificationData,
    list_notifications,
    send_notification,
)
from notifyhub.domain.entities import LiteralContent, Recipient
from notifyhub.domain.exceptions import DeliveryError, ValidationError
from notifyhub.utils import now_utc


def _send(session, registry, *, channel="sms", value="11987654321"):
    recipient_type = "email" if channel == "email" else "phone"
    return send_notification(
        session,
        registry,
        NewNotificationData(
            recipient=Recipient(type=recipient_type, value=value),
            channel=channel,
            content=LiteralContent(text="hello"),
        ),
    ).notification


def test_pagination_reports_partial_last_page(session, registry):
    for _ in range(45):
        _send(session, registry)

    page = list_notifications(session, page=3, limit=20)

    assert page.total == 45
    assert page.pages == 3
    assert len(page.items) == 5
    assert page.page == 3


def test_empty_listing_has_no_pages(session):
    page = list_notifications(session)

    assert page.items == []
    assert page.total == 0
    assert page.pages == 0
    assert page.limit == 20


def test_listing_filters(session, registry, providers):
    providers["sendgrid"].fail = True
    _send(session, registry)
    _send(session, registry, value="21911112222")
    with pytest.raises(DeliveryError):
        _send(session, registry, channel="email", value="ana@example.com")

    assert list_notifications(session, channel="sms").total == 2
    assert list_notifications(session, status="failed").total == 1
    assert list_notifications(session, recipient="+5521911112222").total == 1
    assert list_notifications(session, created_from=now_utc() + timedelta(hours=1)).total == 0


def test_listing_is_newest_first(session, registry):
    first = _send(session, registry)
    second = _send(session, registry)

    items = list_notifications(session).items

    assert [item.id for item in items] == [second.id, first.id]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page": 0},
        {"limit": 0},
        {"limit": 101},
        {"status": "lost"},
        {"channel": "fax"},
    ],
)
def test_listing_rejects_invalid_arguments(session, kwargs):
    with pytest.raises(ValidationError):
        list_notifications(session, **kwargs)
