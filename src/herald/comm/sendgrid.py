"""SendGrid email client."""

import asyncio
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from .errors import ProviderResponseError


class SendGridClient:
    """Async wrapper over the SendGrid mail send SDK."""

    def __init__(self, api_key: str, from_email: str):
        if not api_key:
            raise ValueError("SendGrid API key is required")

        self.from_email = from_email
        self._client = SendGridAPIClient(api_key)

    async def send_email(
        self, to: str, subject: str, text: str, html: Optional[str] = None
    ) -> Optional[str]:
        """
        Send a single email.

        Returns:
            The provider message id, when SendGrid returns one

        Raises:
            ProviderResponseError: If SendGrid does not accept the message
        """
        mail = Mail(
            from_email=self.from_email,
            to_emails=to,
            subject=subject,
            plain_text_content=text,
            html_content=html,
        )
        return await asyncio.to_thread(self._send, mail)

    def _send(self, mail: Mail) -> Optional[str]:
        try:
            response = self._client.send(mail)
        except Exception as e:
            # The SDK raises python_http_client errors carrying status_code and body
            raise ProviderResponseError(
                "sendgrid",
                f"Mail send rejected: {getattr(e, 'body', None) or e}",
                getattr(e, "status_code", None),
            ) from e

        if response.status_code not in (200, 202):
            raise ProviderResponseError(
                "sendgrid", f"Mail send rejected: {response.body}", response.status_code
            )
        return response.headers.get("X-Message-Id")
