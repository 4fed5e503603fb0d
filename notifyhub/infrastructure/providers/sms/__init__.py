"""SMS delivery providers."""

from .aws_sns import AwsSnsSmsProvider
from .twilio import TwilioSmsProvider

__all__ = ["AwsSnsSmsProvider", "TwilioSmsProvider"]
