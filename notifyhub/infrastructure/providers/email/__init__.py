"""Email delivery providers."""

from .aws_ses import AwsSesEmailProvider
from .sendgrid import SendGridEmailProvider

__all__ = ["AwsSesEmailProvider", "SendGridEmailProvider"]
