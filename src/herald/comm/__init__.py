"""Clients for the hosted email, SMS and push providers."""

from .errors import ProviderResponseError
from .expo import ExpoPushClient
from .sendgrid import SendGridClient
from .twilio import TwilioClient

__all__ = [
    "ExpoPushClient",
    "ProviderResponseError",
    "SendGridClient",
    "TwilioClient",
]
