"""Unit tests for the Twilio SMS and WhatsApp providers."""

from __future__ import annotations

import types
from datetime import datetime, timezone

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import ReadTimeout
from twilio.base.exceptions import TwilioRestException

from notifyhub.config import Settings
from notifyhub.domain.entities import NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers import MessageContent
from notifyhub.infrastructure.providers.sms import TwilioSmsProvider
from notifyhub.infrastructure.providers.whatsapp import TwilioWhatsAppProvider
from notifyhub.infrastructure.providers.whatsapp.twilio_whatsapp import whatsapp_address

SETTINGS = Settings(
    _env_file=None,
    twilio_account_sid="AC123",
    twilio_auth_token="secret",
    twilio_phone_number="+15550001111",
)


def _message(**overrides):
    values = {
        "sid": "SM123",
        "status": "queued",
        "to": "+5511987654321",
        "from_": "+15550001111",
        "num_segments": "1",
        "price": None,
        "error_code": None,
        "error_message": None,
        "date_created": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "date_updated": datetime(2024, 5, 1, 12, 5, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return types.SimpleNamespace(**values)


class FakeMessages:
    """Mimics ``client.messages`` for both ``create`` and ``messages(sid).fetch()``."""

    def __init__(self, error=None, fetched=None, fetch_error=None):
        self.created = []
        self.error = error
        self.fetch_error = fetch_error
        self.fetched = fetched or _message(status="delivered")

    def create(self, **kwargs):
        self.created.append(kwargs)
        if self.error is not None:
            raise self.error
        return _message(to=kwargs["to"])

    def __call__(self, sid):
        return types.SimpleNamespace(fetch=self._fetch)

    def _fetch(self):
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.fetched


def _client(messages=None, account_status="active", account_error=None):
    account = types.SimpleNamespace(status=account_status)

    def fetch_account():
        if account_error is not None:
            raise account_error
        return account

    accounts = lambda sid: types.SimpleNamespace(fetch=fetch_account)  # noqa: E731
    return types.SimpleNamespace(
        messages=messages or FakeMessages(),
        api=types.SimpleNamespace(v2010=types.SimpleNamespace(accounts=accounts)),
    )


def test_sms_send_success():
    messages = FakeMessages()
    provider = TwilioSmsProvider(SETTINGS, client=_client(messages))

    result = provider.send("+5511987654321", MessageContent(text="Hi"), NotificationOptions())

    assert messages.created == [{"body": "Hi", "from_": "+15550001111", "to": "+5511987654321"}]
    assert result.message_id == "SM123"
    assert result.status == "queued"
    assert result.timestamp == "2024-05-01T12:00:00+00:00"
    assert result.details["num_segments"] == "1"


def test_sms_send_maps_rest_errors():
    error = TwilioRestException(400, "/Messages", msg="Invalid 'To' number", code=21211)
    provider = TwilioSmsProvider(SETTINGS, client=_client(FakeMessages(error=error)))

    with pytest.raises(ProviderError) as excinfo:
        provider.send("+5511987654321", MessageContent(text="Hi"), NotificationOptions())

    assert "21211" in str(excinfo.value)
    assert excinfo.value.provider == "twilio"
    assert excinfo.value.__cause__ is error


def test_sms_requires_sender_number():
    settings = Settings(_env_file=None, twilio_account_sid="AC123", twilio_auth_token="secret")
    provider = TwilioSmsProvider(settings, client=_client())

    with pytest.raises(ProviderConfigurationError):
        provider.send("+5511987654321", MessageContent(text="Hi"), NotificationOptions())


def test_sms_without_credentials_is_unhealthy():
    provider = TwilioSmsProvider(
        Settings(_env_file=None, twilio_account_sid=None, twilio_auth_token=None)
    )

    assert provider.check_health() is False
    with pytest.raises(ProviderConfigurationError):
        provider.send("+5511987654321", MessageContent(text="Hi"), NotificationOptions())


def test_sms_get_status_fetches_message():
    provider = TwilioSmsProvider(SETTINGS, client=_client())

    status = provider.get_status("SM123")

    assert status.status == "delivered"
    assert status.updated_at == "2024-05-01T12:05:00+00:00"


def test_health_reflects_account_status():
    assert TwilioSmsProvider(SETTINGS, client=_client()).check_health() is True
    suspended = TwilioSmsProvider(SETTINGS, client=_client(account_status="suspended"))
    assert suspended.check_health() is False


def test_whatsapp_send_prefixes_addresses_and_media():
    messages = FakeMessages()
    provider = TwilioWhatsAppProvider(SETTINGS, client=_client(messages))

    provider.send(
        "+5511987654321",
        MessageContent(text="Boleto"),
        NotificationOptions(media_url="https://x/boleto.pdf"),
    )

    assert messages.created == [
        {
            "body": "Boleto",
            "from_": "whatsapp:+15550001111",
            "to": "whatsapp:+5511987654321",
            "media_url": ["https://x/boleto.pdf"],
        }
    ]


def test_whatsapp_address_is_idempotent():
    assert whatsapp_address("whatsapp:+1555") == "whatsapp:+1555"
    assert whatsapp_address("+1555") == "whatsapp:+1555"


@pytest.mark.parametrize("provider_class", [TwilioSmsProvider, TwilioWhatsAppProvider])
def test_send_timeout_is_reported_as_provider_error(provider_class):
    error = ReadTimeout("read timed out")
    provider = provider_class(SETTINGS, client=_client(FakeMessages(error=error)))

    with pytest.raises(ProviderError) as excinfo:
        provider.send("+5511987654321", MessageContent(text="Hi"), NotificationOptions())

    assert excinfo.value.__cause__ is error
    assert "read timed out" in str(excinfo.value)


@pytest.mark.parametrize("provider_class", [TwilioSmsProvider, TwilioWhatsAppProvider])
def test_status_lookup_timeout_is_reported_as_provider_error(provider_class):
    messages = FakeMessages(fetch_error=ReadTimeout("read timed out"))
    provider = provider_class(SETTINGS, client=_client(messages))

    with pytest.raises(ProviderError):
        provider.get_status("SM123")


@pytest.mark.parametrize("provider_class", [TwilioSmsProvider, TwilioWhatsAppProvider])
def test_unreachable_api_is_unhealthy(provider_class):
    client = _client(account_error=RequestsConnectionError("connection refused"))

    assert provider_class(SETTINGS, client=client).check_health() is False
