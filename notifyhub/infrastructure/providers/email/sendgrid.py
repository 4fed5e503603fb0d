"""Email delivery through the SendGrid v3 Mail Send API."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import URLError

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import (
    Attachment as SendGridAttachment,
    Bcc,
    Cc,
    Disposition,
    FileContent,
    FileName,
    FileType,
    From,
    Mail,
    ReplyTo,
)

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_EMAIL, NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers.base import (
    MessageContent,
    ProviderResult,
    ProviderStatus,
    unsupported_status,
)
from notifyhub.utils import now_utc, to_isoformat

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{field}: {message}")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        return json.dumps(parsed)

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception) -> str:
    """Log a SendGrid API error and return its description."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        description = f"status {status_code}: {details}"
    elif status_code:
        description = f"status {status_code}"
    else:
        description = details or str(exc)
    logger.error("SendGrid API request failed with %s", description)
    return description


class SendGridEmailProvider:
    """Send email through SendGrid using the configured sender identity."""

    name = "sendgrid"
    channel = CHANNEL_EMAIL

    def __init__(self, settings: Settings, *, client: SendGridAPIClient | None = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> SendGridAPIClient:
        if self._client is None:
            if not self._settings.sendgrid_api_key:
                raise ProviderConfigurationError(
                    "SENDGRID_API_KEY and SENDGRID_FROM_EMAIL must be provided to use SendGrid"
                )
            client = SendGridAPIClient(self._settings.sendgrid_api_key)
            client.client.timeout = self._settings.provider_timeout_seconds
            self._client = client
        return self._client

    def build_message(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> Mail:
        message = Mail(
            from_email=From(self._settings.sendgrid_from_email, self._settings.sendgrid_from_name),
            to_emails=to,
            subject=content.subject,
            plain_text_content=content.text,
            html_content=content.html,
        )
        for address in options.cc:
            message.add_cc(Cc(address))
        for address in options.bcc:
            message.add_bcc(Bcc(address))
        if options.reply_to:
            message.reply_to = ReplyTo(options.reply_to)
        for attachment in content.attachments:
            message.add_attachment(
                SendGridAttachment(
                    FileContent(attachment.content),
                    FileName(attachment.filename),
                    FileType(attachment.content_type),
                    Disposition("attachment"),
                )
            )
        return message

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        client = self._get_client()
        message = self.build_message(to, content, options)

        try:
            response = client.send(message)
        except HTTPError as exc:
            details = _log_sendgrid_exception(exc)
            raise ProviderError(
                f"SendGrid failed to send email: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc
        except (URLError, TimeoutError) as exc:
            details = _log_sendgrid_exception(exc)
            raise ProviderError(
                f"SendGrid is unreachable: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
            raise ProviderError(
                f"SendGrid responded with status {status_code}",
                provider=self.name,
                channel=self.channel,
            )

        headers = getattr(response, "headers", None) or {}
        message_id = headers.get("X-Message-Id")
        logger.debug("Email sent via SendGrid with id %s", message_id)
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=message_id,
            timestamp=to_isoformat(now_utc()),
            status="sent",
            details={"to": to, "subject": content.subject, "status_code": status_code},
        )

    def get_status(self, message_id: str) -> ProviderStatus:
        logger.warning("Status check not supported for SendGrid (message %s)", message_id)
        return unsupported_status(
            self.name,
            message_id,
            "SendGrid requires Event Webhook setup for detailed status tracking",
        )

    def check_health(self) -> bool:
        try:
            response = self._get_client().client.scopes.get()
        except ProviderConfigurationError:
            return False
        except (HTTPError, URLError, TimeoutError) as exc:
            logger.warning("SendGrid health check failed: %s", exc)
            return False
        return getattr(response, "status_code", None) == 200


__all__ = ["SendGridEmailProvider"]
