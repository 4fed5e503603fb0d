"""SMS delivery through Amazon SNS."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from notifyhub.config import Settings
from notifyhub.domain.entities import CHANNEL_SMS, NotificationOptions
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


class AwsSnsSmsProvider:
    """Publish SMS messages directly to phone numbers through SNS."""

    name = "aws-sns"
    channel = CHANNEL_SMS

    def __init__(self, settings: Settings, *, client: Any = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = build_boto3_client(
                "sns",
                region=self._settings.aws_region,
                access_key_id=self._settings.aws_access_key_id,
                secret_access_key=self._settings.aws_secret_access_key,
                timeout=self._settings.provider_timeout_seconds,
            )
        return self._client

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        client = self._get_client()
        sms_type = "Transactional" if options.priority == "high" else "Promotional"
        sender_id = options.sender_id or self._settings.aws_sns_sender_id
        try:
            response = client.publish(
                PhoneNumber=to,
                Message=content.text,
                MessageAttributes={
                    "AWS.SNS.SMS.SMSType": {"DataType": "String", "StringValue": sms_type},
                    "AWS.SNS.SMS.SenderID": {"DataType": "String", "StringValue": sender_id},
                },
            )
        except (BotoCoreError, ClientError) as exc:
            details = describe_aws_error(exc)
            logger.error("AWS SNS publish failed: %s", details)
            raise ProviderError(
                f"AWS SNS failed to send SMS: {details}",
                provider=self.name,
                channel=self.channel,
            ) from exc

        message_id = response.get("MessageId")
        logger.debug("SMS sent via AWS SNS with id %s", message_id)
        return ProviderResult(
            success=True,
            provider=self.name,
            message_id=message_id,
            timestamp=to_isoformat(now_utc()),
            status="sent",
            details={"to": to, "sms_type": sms_type, "sender_id": sender_id},
        )

    def get_status(self, message_id: str) -> ProviderStatus:
        logger.warning("Status check not supported for AWS SNS (message %s)", message_id)
        return unsupported_status(
            self.name, message_id, "AWS SNS does not provide direct status checking"
        )

    def check_health(self) -> bool:
        try:
            self._get_client().list_topics()
        except ProviderConfigurationError:
            return False
        except (BotoCoreError, ClientError) as exc:
            logger.warning("AWS SNS health check failed: %s", describe_aws_error(exc))
            return False
        return True


__all__ = ["AwsSnsSmsProvider"]
