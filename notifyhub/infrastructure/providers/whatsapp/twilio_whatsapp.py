"""WhatsApp delivery through Twilio's WhatsApp sender."""

from __future__ import annotations

import logging
from typing import Any

from twilio.rest import Client

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_WHATSAPP, NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers.base import (
    MessageContent,
    ProviderResult,
    ProviderStatus,
)
from notifyhub.infrastructure.providers.sms.twilio import (
    TWILIO_ERRORS,
    build_twilio_client,
    describe_twilio_error,
    twilio_account_is_active,
    twilio_message_details,
)
from notifyhub.utils import now_utc, to_isoformat

logger = logging.getLogger(__name__)

_WHATSAPP_PREFIX = "whatsapp:"


def whatsapp_address(number: str) -> str:
    if number.startswith(_WHATSAPP_PREFIX):
        return number
    return _WHATSAPP_PREFIX + number


class TwilioWhatsAppProvider:
    name = "twilio-whatsapp"
    channel = CHANNEL_WHATSAPP

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
        if not self._settings.twilio_phone_number:
            raise ProviderConfigurationError(
                "TWILIO_PHONE_NUMBER must be provided to send WhatsApp messages"
            )

        request: dict[str, Any] = {
            "body": content.text,
            "from_": whatsapp_address(self._settings.twilio_phone_number),
            "to": whatsapp_address(to),
        }
        if options.media_url:
            request["media_url"] = [options.media_url]

        try:
            message = client.messages.create(**request)
        except TWILIO_ERRORS as exc:
            details = describe_twilio_error(exc)
            logger.error("Twilio WhatsApp request failed: %s", details)
            raise ProviderError(
                f"Twilio failed to send WhatsApp message: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        logger.debug("WhatsApp message sent via Twilio with sid %s", message.sid)
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
            logger.warning("Twilio WhatsApp health check failed: %s", describe_twilio_error(exc))
            return False


__all__ = ["TwilioWhatsAppProvider", "whatsapp_address"]
