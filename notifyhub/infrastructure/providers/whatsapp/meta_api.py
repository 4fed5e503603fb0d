"""WhatsApp delivery through the Meta WhatsApp Cloud API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_WHATSAPP, NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers.base import (
    MessageContent,
    ProviderResult,
    ProviderStatus,
    unsupported_status,
)
from notifyhub.utils import now_utc, to_isoformat

logger = logging.getLogger(__name__)


def _graph_error_details(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"status {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"status {response.status_code}: {error['message']}"
    return f"status {response.status_code}"


class MetaWhatsAppProvider:
    """Send text, media or approved template messages through the Graph API."""

    name = "meta-api"
    channel = CHANNEL_WHATSAPP

    def __init__(self, settings: Settings, *, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client
        self._owns_client = False

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            if not (self._settings.meta_api_access_token and self._settings.meta_api_phone_number_id):
                raise ProviderConfigurationError(
                    "META_API_ACCESS_TOKEN and META_API_PHONE_NUMBER_ID must be provided to use the Meta API"
                )
            self._client = httpx.Client(
                base_url=self._settings.meta_api_base_url,
                headers={"Authorization": f"Bearer {self._settings.meta_api_access_token}"},
                timeout=self._settings.provider_timeout_seconds,
            )
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close the HTTP client created by this provider; injected clients stay open."""

        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None
            self._owns_client = False

    def build_payload(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> dict[str, Any]:
        """Return the Graph API message body for ``content``.

        A vendor template takes precedence over media, and media over text.
        """

        payload: dict[str, Any] = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            # Graph API expects the number without the leading plus sign.
            "to": to.lstrip("+"),
        }
        if content.template_name:
            template: dict[str, Any] = {
                "name": content.template_name,
                "language": {"code": self._settings.meta_api_language_code},
                "components": [],
            }
            if content.template_params:
                template["components"].append(
                    {
                        "type": "body",
                        "parameters": [
                            {"type": "text", "text": str(value)}
                            for value in content.template_params.values()
                        ],
                    }
                )
            payload["type"] = "template"
            payload["template"] = template
        elif options.media_url and options.media_type:
            media: dict[str, Any] = {"link": options.media_url}
            if content.text:
                media["caption"] = content.text
            payload["type"] = options.media_type
            payload[options.media_type] = media
        else:
            payload["type"] = "text"
            payload["text"] = {"preview_url": False, "body": content.text}
        return payload

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        client = self._get_client()
        payload = self.build_payload(to, content, options)
        url = f"/{self._settings.meta_api_phone_number_id}/messages"

        try:
            response = client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            details = _graph_error_details(exc.response)
            logger.error("Meta API rejected WhatsApp message: %s", details)
            raise ProviderError(
                f"Meta API failed to send WhatsApp message: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Meta API request failed: %s", exc)
            raise ProviderError(
                f"Meta API is unreachable: {exc}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        data = response.json()
        messages = data.get("messages") or [{}]
        message_id = messages[0].get("id")
        logger.debug("WhatsApp message sent via Meta API with id %s", message_id)
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=message_id,
            timestamp=to_isoformat(now_utc()),
            status="sent",
            details={"to": payload["to"], "type": payload["type"], "provider_response": data},
        )

    def get_status(self, message_id: str) -> ProviderStatus:
        logger.warning("Status check not supported for Meta API (message %s)", message_id)
        return unsupported_status(
            self.name, message_id, "Meta API requires webhook setup for status updates"
        )

    def check_health(self) -> bool:
        try:
            response = self._get_client().get(f"/{self._settings.meta_api_phone_number_id}")
        except ProviderConfigurationError:
            return False
        except httpx.HTTPError as exc:
            logger.warning("Meta API health check failed: %s", exc)
            return False
        return response.status_code == 200


__all__ = ["MetaWhatsAppProvider"]
