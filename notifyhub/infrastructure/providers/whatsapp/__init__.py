"""WhatsApp delivery providers."""

from .meta_api import MetaWhatsAppProvider
from .twilio_whatsapp import TwilioWhatsAppProvider

__all__ = ["MetaWhatsAppProvider", "TwilioWhatsAppProvider"]
