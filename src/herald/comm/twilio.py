"""Twilio SMS client."""

import asyncio

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from .errors import ProviderResponseError


class TwilioClient:
    """Async wrapper over the Twilio REST SDK's message resource."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        if not (account_sid and auth_token and from_number):
            raise ValueError("Twilio account SID, auth token and phone number are required")

        self.from_number = from_number
        self._client = Client(account_sid, auth_token)

    async def send_sms(self, to: str, body: str) -> str:
        """
        Send an SMS message.

        Args:
            to: Destination phone number in E.164 format
            body: Message text

        Returns:
            The Twilio message SID

        Raises:
            ProviderResponseError: If Twilio does not accept the message
        """
        return await asyncio.to_thread(self._create_message, to, body)

    def _create_message(self, to: str, body: str) -> str:
        try:
            message = self._client.messages.create(to=to, from_=self.from_number, body=body)
        except TwilioRestException as e:
            raise ProviderResponseError("twilio", e.msg, e.status) from e
        return message.sid
