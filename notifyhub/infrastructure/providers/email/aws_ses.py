"""Email delivery through Amazon SES."""

from __future__ import annotations

import base64
import logging
from email.message import EmailMessage
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_EMAIL, NotificationOptions
from notifyhub.domain.exceptions import ProviderConfigurationError, ProviderError
from notifyhub.infrastructure.providers.aws import build_boto3_client, describe_aws_error
from notifyhub.infrastructure.providers.base import (
    MessageContent,
    ProviderResult,
    ProviderStatus,
    unsupported_status,
)
from notifyhub.utils import now_utc, to_isoformat

logger = logging.getLogger(__name__)

_CHARSET = "UTF-8"


def build_raw_message(
    *,
    sender: str,
    to: str,
    content: MessageContent,
    options: NotificationOptions,
) -> EmailMessage:
    """Build the MIME message used when attachments must be sent.

    Attachment contents are base64 encoded in the notification payload.
    """

    message = EmailMessage()
    message["Subject"] = content.subject or ""
    message["From"] = sender
    message["To"] = to
    if options.cc:
        message["Cc"] = ", ".join(options.cc)
    if options.reply_to:
        message["Reply-To"] = options.reply_to

    message.set_content(content.text or "")
    if content.html:
        message.add_alternative(content.html, subtype="html")

    for attachment in content.attachments:
        maintype, _, subtype = attachment.content_type.partition("/")
        message.add_attachment(
            base64.b64decode(attachment.content),
            maintype=maintype or "application",
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return message


class AwsSesEmailProvider:
    """Send email through SES, switching to raw MIME when attachments exist."""

    name = "aws-ses"
    channel = CHANNEL_EMAIL

    def __init__(self, settings: Settings, *, client: Any = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = build_boto3_client(
                "ses",
                region=self._settings.aws_ses_region,
                access_key_id=self._settings.aws_ses_access_key_id,
                secret_access_key=self._settings.aws_ses_secret_access_key,
                timeout=self._settings.provider_timeout_seconds,
            )
        return self._client

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        client = self._get_client()
        sender = self._settings.aws_ses_from_email
        if not sender:
            raise ProviderConfigurationError("AWS_SES_FROM_EMAIL must be provided to use AWS SES")

        try:
            if content.attachments:
                raw = build_raw_message(sender=sender, to=to, content=content, options=options)
                response = client.send_raw_email(
                    Source=sender,
                    Destinations=[to, *options.cc, *options.bcc],
                    RawMessage={"Data": raw.as_bytes()},
                )
            else:
                response = client.send_email(**self._simple_email_request(sender, to, content, options))
        except (BotoCoreError, ClientError) as exc:
            details = describe_aws_error(exc)
            logger.error("AWS SES send failed: %s", details)
            raise ProviderError(
                f"AWS SES failed to send email: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        message_id = response.get("MessageId")
        logger.debug("Email sent via AWS SES with id %s", message_id)
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=message_id,
            timestamp=to_isoformat(now_utc()),
            status="sent",
            details={"to": to, "subject": content.subject},
        )

    @staticmethod
    def _simple_email_request(
        sender: str, to: str, content: MessageContent, options: NotificationOptions
    ) -> dict[str, Any]:
        destination: dict[str, Any] = {"ToAddresses": [to]}
        if options.cc:
            destination["CcAddresses"] = list(options.cc)
        if options.bcc:
            destination["BccAddresses"] = list(options.bcc)

        body: dict[str, Any] = {}
        if content.text:
            body["Text"] = {"Data": content.text, "Charset": _CHARSET}
        if content.html:
            body["Html"] = {"Data": content.html, "Charset": _CHARSET}

        request: dict[str, Any] = {
            "Source": sender,
            "Destination": destination,
            "Message": {
                "Subject": {"Data": content.subject or "", "Charset": _CHARSET},
                "Body": body,
            },
        }
        if options.reply_to:
            request["ReplyToAddresses"] = [options.reply_to]
        return request

    def get_status(self, message_id: str) -> ProviderStatus:
        logger.warning("Status check not supported for AWS SES (message %s)", message_id)
        return unsupported_status(
            self.name,
            message_id,
            "AWS SES requires delivery notifications setup for detailed status tracking",
        )

    def check_health(self) -> bool:
        try:
            quota = self._get_client().get_send_quota()
        except ProviderConfigurationError:
            return False
        except (BotoCoreError, ClientError) as exc:
            logger.warning("AWS SES health check failed: %s", describe_aws_error(exc))
            return False
        return bool(quota.get("Max24HourSend"))


__all__ = ["AwsSesEmailProvider", "build_raw_message"]
