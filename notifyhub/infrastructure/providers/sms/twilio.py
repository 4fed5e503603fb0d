"""SMS delivery through the Twilio Programmable Messaging API."""

from __future__ import annotations

import logging
from typing import Any

from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_SMS, NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers.base import (
    MessageContent,
    ProviderResult,
    ProviderStatus,
)
from notifyhub.utils import now_utc, to_isoformat

logger = logging.getLogger(__name__)

# SDK errors plus transport failures (timeouts, refused connections) from requests.
TWILIO_ERRORS = (TwilioException, RequestException)


def build_twilio_client(settings: Settings) -> Client:
    """Create a Twilio REST client honouring the provider timeout."""

    if not (settings.twilio_account_sid and settings.twilio_auth_token):
        raise ProviderConfigurationError(
            "TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN must be provided to use Twilio"
        )
    http_client = TwilioHttpClient(timeout=settings.provider_timeout_seconds)
    return Client(
        settings.twilio_account_sid,
        settings.twilio_auth_token,
        http_client=http_client,
    )


def describe_twilio_error(exc: Exception) -> str:
    """Return a readable description of a Twilio SDK or transport error."""

    if isinstance(exc, TwilioRestException):
        return f"status {exc.status}, code {exc.code}: {exc.msg}"
    return str(exc)


def twilio_account_is_active(client: Client, account_sid: str) -> bool:
    account = client.api.v2010.accounts(account_sid).fetch()
    return account.status == "active"


def twilio_message_details(message: Any) -> dict[str, Any]:
    return {
        "to": message.to,
        "from": message.from_,
        "status": message.status,
        "num_segments": message.num_segments,
        "price": message.price,
        "error_code": message.error_code,
        "error_message": message.error_message,
    }


class TwilioSmsProvider:
    """Send SMS messages from the configured Twilio number."""

    name = "twilio"
    channel = CHANNEL_SMS

    def __init__(self, settings: Settings, *, client: Client | None = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = build_twilio_client(self._settings)
        return self._client

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        client = self._get_client()
        from_number = self._settings.twilio_phone_number
        if not from_number:
            raise ProviderConfigurationError("TWILIO_PHONE_NUMBER must be provided to send SMS")

        try:
            message = client.messages.create(body=content.text, from_=from_number, to=to)
        except TWILIO_ERRORS as exc:
            details = describe_twilio_error(exc)
            logger.error("Twilio SMS request failed: %s", details)
            raise ProviderError(
                f"Twilio failed to send SMS: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        logger.debug("SMS sent via Twilio with sid %s", message.sid)
        created = message.date_created
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=message.sid,
            timestamp=to_isoformat(created) if created else to_isoformat(now_utc()),
            status=message.status or "sent",
            details=twilio_message_details(message),
        )

    def get_status(self, message_id: str) -> ProviderStatus:
        client = self._get_client()
        try:
            message = client.messages(message_id).fetch()
        except TWILIO_ERRORS as exc:
            details = describe_twilio_error(exc)
            logger.error("Twilio status lookup for %s failed: %s", message_id, details)
            raise ProviderError(
                f"Twilio failed to fetch message {message_id}: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        return ProviderStatus(
            message_id=message.sid,
            status=message.status,
            provider=self.name,
            updated_at=to_isoformat(message.date_updated or now_utc()),
            details=twilio_message_details(message),
        )

    def check_health(self) -> bool:
        try:
            client = self._get_client()
            return twilio_account_is_active(client, self._settings.twilio_account_sid)
        except ProviderConfigurationError:
            return False
        except TWILIO_ERRORS as exc:
            logger.warning("Twilio health check failed: %s", describe_twilio_error(exc))
            return False


__all__ = [
    "TWILIO_ERRORS",
    "TwilioSmsProvider",
    "build_twilio_client",
    "describe_twilio_error",
    "twilio_account_is_active",
    "twilio_message_details",
]
