"""Tests for notification dispatch, fallback and lifecycle management."""

from __future__ import annotations

from datetime import timedelta

import pytest

from notifyhub.application.use_cases.notifications import (
    FALLBACK_NOTIFICATION_KEY,
    IS_FALLBACK_KEY,
    ORIGINAL_NOTIFICATION_KEY,
    NewNotificationData,
    cancel_notification,
    dispatch_due_notifications,
    get_notification,
    get_notification_status,
    list_notifications,
    send_notification,
    trigger_scheduled_notification,
    update_notification_status,
)
from notifyhub.application.use_cases.templates import NewTemplateVersionData, create_template
from notifyhub.domain.entities import (
    LiteralContent,
    NotificationOptions,
    Recipient,
    TemplateContent,
)
from notifyhub.domain.exceptions import (
    DeliveryError,
    NotFoundError,
    ProviderConfigurationError,
    ProviderError,
    ValidationError,
)
from notifyhub.utils import now_utc


def _sms(**overrides) -> NewNotificationData:
    values = {
        "recipient": Recipient(type="phone", value="(11) 98765-4321"),
        "channel": "sms",
        "content": LiteralContent(text="Your code is 1234"),
    }
    values.update(overrides)
    return NewNotificationData(**values)


def test_send_notification_delivers_through_default_provider(session, registry, providers):
    result = send_notification(session, registry, _sms())

    notification = result.notification
    assert notification.status == "sent"
    assert notification.provider == "twilio"
    assert notification.recipient.value == "+5511987654321"
    assert [entry.status for entry in notification.status_history] == [
        "queued",
        "processing",
        "sent",
    ]
    assert notification.provider_response.message_id == "twilio-1"
    assert result.status_url == f"/notifications/{notification.id}/status"

    to, content, _ = providers["twilio"].sent[0]
    assert to == "+5511987654321"
    assert content.text == "Your code is 1234"
    assert get_notification(session, notification.id).status == "sent"


def test_send_notification_honours_explicit_provider(session, registry, providers):
    result = send_notification(session, registry, _sms(provider="aws-sns"))

    assert result.notification.provider == "aws-sns"
    assert providers["twilio"].sent == []


def test_fallback_chain_links_every_attempt(session, registry, providers):
    providers["twilio"].fail = True
    providers["sendgrid"].fail = True

    result = send_notification(
        session,
        registry,
        _sms(options=NotificationOptions(fallback_channels=["email", "whatsapp"])),
    )

    whatsapp = result.notification
    assert whatsapp.channel == "whatsapp"
    assert whatsapp.status == "sent"
    assert whatsapp.provider == "meta-api"
    assert whatsapp.metadata[IS_FALLBACK_KEY] is True
    assert whatsapp.options.fallback_channels == []

    email = get_notification(session, whatsapp.metadata[ORIGINAL_NOTIFICATION_KEY])
    assert email.channel == "email"
    assert email.status == "failed"
    assert email.metadata[FALLBACK_NOTIFICATION_KEY] == whatsapp.id
    assert email.options.fallback_channels == ["whatsapp"]

    sms = get_notification(session, email.metadata[ORIGINAL_NOTIFICATION_KEY])
    assert sms.channel == "sms"
    assert sms.status == "failed"
    assert sms.metadata[FALLBACK_NOTIFICATION_KEY] == email.id
    assert ORIGINAL_NOTIFICATION_KEY not in sms.metadata
    assert sms.status_history[-1].details.startswith("Failed:")

    assert list_notifications(session).total == 3


def test_exhausted_fallbacks_raise_delivery_error_for_last_attempt(
    session, registry, providers
):
    for provider in providers.values():
        provider.fail = True

    with pytest.raises(DeliveryError) as excinfo:
        send_notification(
            session,
            registry,
            _sms(options=NotificationOptions(fallback_channels=["whatsapp"])),
        )

    error = excinfo.value
    assert error.channel == "whatsapp"
    assert error.provider == "meta-api"
    assert isinstance(error.__cause__, ProviderError)
    failed = get_notification(session, error.notification_id)
    assert failed.status == "failed"
    assert failed.metadata[IS_FALLBACK_KEY] is True


def test_unknown_provider_fails_the_notification(session, registry):
    with pytest.raises(DeliveryError) as excinfo:
        send_notification(session, registry, _sms(provider="carrier-pigeon"))

    assert isinstance(excinfo.value.__cause__, ProviderConfigurationError)
    assert get_notification(session, excinfo.value.notification_id).status == "failed"


def test_unexpected_provider_exception_is_wrapped(session, registry, providers):
    providers["twilio"].error = RuntimeError("socket closed")

    with pytest.raises(DeliveryError) as excinfo:
        send_notification(session, registry, _sms())

    cause = excinfo.value.__cause__
    assert isinstance(cause, ProviderError)
    assert isinstance(cause.__cause__, RuntimeError)


@pytest.mark.parametrize(
    "overrides",
    [
        {"channel": "fax"},
        {"recipient": Recipient(type="pager", value="123")},
        {"recipient": Recipient(type="phone", value="  ")},
        {"content": LiteralContent()},
        {"options": NotificationOptions(priority="urgent")},
        {"options": NotificationOptions(fallback_channels=["sms"])},
        {"options": NotificationOptions(fallback_channels=["email", "email"])},
        {"options": NotificationOptions(fallback_channels=["telegram"])},
    ],
)
def test_send_notification_rejects_invalid_requests(session, registry, overrides):
    with pytest.raises(ValidationError):
        send_notification(session, registry, _sms(**overrides))

    assert list_notifications(session).total == 0


def test_whatsapp_vendor_template_counts_as_content(session, registry, providers):
    result = send_notification(
        session,
        registry,
        _sms(
            channel="whatsapp",
            content=LiteralContent(template_name="order_update", template_params={"1": "42"}),
        ),
    )

    assert result.notification.status == "sent"
    _, content, _ = providers["meta-api"].sent[0]
    assert content.template_name == "order_update"
    assert content.template_params == {"1": "42"}


def test_template_content_is_rendered_before_storage(session, registry, providers):
    create_template(
        session,
        name="reset",
        versions=[
            NewTemplateVersionData(
                channel="email", subject="Reset for {{name}}", content="Code {{code}}"
            )
        ],
    )

    result = send_notification(
        session,
        registry,
        NewNotificationData(
            recipient=Recipient(type="email", value="Ana@Example.com"),
            channel="email",
            content=TemplateContent(template_id="reset", parameters={"name": "Ana", "code": 7}),
        ),
    )

    stored = result.notification
    assert isinstance(stored.content, LiteralContent)
    assert stored.content.subject == "Reset for Ana"
    assert stored.recipient.value == "ana@example.com"
    _, content, _ = providers["sendgrid"].sent[0]
    assert content.text == "Code 7"
    assert content.html == "Code 7"


def test_plain_email_uses_text_as_html_body(session, registry, providers):
    send_notification(
        session,
        registry,
        NewNotificationData(
            recipient=Recipient(type="email", value="ana@example.com"),
            channel="email",
            content=LiteralContent(subject="Hello", text="Plain body"),
        ),
    )

    _, content, _ = providers["sendgrid"].sent[0]
    assert content.text == "Plain body"
    assert content.html == "Plain body"


def test_template_errors_prevent_storage(session, registry):
    with pytest.raises(NotFoundError):
        send_notification(
            session,
            registry,
            _sms(content=TemplateContent(template_id="missing")),
        )

    assert list_notifications(session).total == 0


def test_scheduled_notification_waits_for_trigger(session, registry, providers):
    due_at = now_utc() + timedelta(hours=1)

    result = send_notification(
        session, registry, _sms(options=NotificationOptions(scheduled_for=due_at))
    )

    assert result.notification.status == "scheduled"
    assert providers["twilio"].sent == []

    triggered = trigger_scheduled_notification(session, registry, result.notification.id)
    assert triggered.notification.status == "sent"

    with pytest.raises(ValidationError):
        trigger_scheduled_notification(session, registry, result.notification.id)


def test_dispatch_due_notifications_only_processes_due_ones(session, registry, providers):
    now = now_utc()
    soon = send_notification(
        session,
        registry,
        _sms(options=NotificationOptions(scheduled_for=now + timedelta(minutes=5))),
    ).notification
    later = send_notification(
        session,
        registry,
        _sms(options=NotificationOptions(scheduled_for=now + timedelta(days=1))),
    ).notification

    assert dispatch_due_notifications(session, registry, now=now) == []

    results = dispatch_due_notifications(session, registry, now=now + timedelta(minutes=10))

    assert [result.notification.id for result in results] == [soon.id]
    assert get_notification(session, later.id).status == "scheduled"


def test_dispatch_due_notifications_continues_after_failure(session, registry, providers):
    now = now_utc()
    providers["twilio"].fail = True
    send_notification(
        session, registry, _sms(options=NotificationOptions(scheduled_for=now))
    )
    ok = send_notification(
        session,
        registry,
        _sms(provider="aws-sns", options=NotificationOptions(scheduled_for=now)),
    ).notification

    results = dispatch_due_notifications(session, registry, now=now + timedelta(seconds=1))

    assert [result.notification.id for result in results] == [ok.id]


def test_cancel_only_applies_to_scheduled_notifications(session, registry):
    scheduled = send_notification(
        session,
        registry,
        _sms(options=NotificationOptions(scheduled_for=now_utc() + timedelta(hours=1))),
    ).notification
    sent = send_notification(session, registry, _sms()).notification

    cancelled = cancel_notification(session, scheduled.id)
    assert cancelled.status == "cancelled"
    assert cancelled.status_history[-1].status == "cancelled"

    with pytest.raises(ValidationError):
        cancel_notification(session, sent.id)
    untouched = get_notification(session, sent.id)
    assert untouched.status == "sent"
    assert len(untouched.status_history) == len(sent.status_history)
    with pytest.raises(ValidationError):
        cancel_notification(session, scheduled.id)
    with pytest.raises(NotFoundError):
        cancel_notification(session, "does-not-exist")


def test_update_status_merges_provider_response(session, registry):
    sent = send_notification(session, registry, _sms()).notification

    delivered = update_notification_status(
        session,
        sent.id,
        "delivered",
        provider_response={"raw_response": {"event": "delivered"}},
    )

    assert delivered.status == "delivered"
    assert delivered.status_history[-1].details == "Status updated to delivered"
    assert delivered.provider_response.message_id == "twilio-1"
    assert delivered.provider_response.raw_response == {"event": "delivered"}

    with pytest.raises(ValidationError):
        update_notification_status(session, sent.id, "bounced")


def test_status_refresh_queries_provider_without_touching_record(session, registry):
    sent = send_notification(session, registry, _sms()).notification

    report = get_notification_status(session, registry, sent.id, refresh=True)

    assert report.provider_status.status == "delivered"
    assert report.provider_status.message_id == "twilio-1"
    assert report.notification.status == "sent"
    assert get_notification(session, sent.id).status == "sent"
    assert get_notification_status(session, registry, sent.id).provider_status is None
