"""Expo push notification client."""

import asyncio
from typing import Any, Dict, Optional

import requests
from exponent_server_sdk import (
    PushClient,
    PushMessage,
    PushServerError,
    PushTicketError,
)

from .errors import ProviderResponseError

ANDROID_CHANNEL_ID = "emergency-alerts"


class ExpoPushClient:
    """Async wrapper over the Expo server SDK."""

    def __init__(self, access_token: Optional[str] = None):
        self.access_token = access_token

    async def send_push(
        self,
        token: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """
        Send one push notification to an Expo push token.

        Returns:
            The push ticket id

        Raises:
            ProviderResponseError: If Expo rejects the request or the ticket
        """
        message = PushMessage(
            to=token,
            title=title,
            body=body,
            data=data or {},
            sound="default",
            priority="high",
            channel_id=ANDROID_CHANNEL_ID,
        )
        return await asyncio.to_thread(self._publish, message)

    def _publish(self, message: PushMessage) -> Optional[str]:
        with requests.Session() as session:
            session.headers.update(
                {"accept": "application/json", "content-type": "application/json"}
            )
            if self.access_token:
                session.headers["Authorization"] = f"Bearer {self.access_token}"

            try:
                ticket = PushClient(session=session).publish(message)
                ticket.validate_response()
            except PushServerError as e:
                raise ProviderResponseError(
                    "expo",
                    f"Push send rejected: {e}",
                    getattr(e.response, "status_code", None),
                ) from e
            except PushTicketError as e:
                raise ProviderResponseError("expo", e.message) from e

        return ticket.id
