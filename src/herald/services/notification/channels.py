"""Notification channel adapter implementations."""

import asyncio
import html
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Protocol

from ...comm import ExpoPushClient, SendGridClient, TwilioClient
from ...config.logging import get_logger
from .addresses import is_valid_address
from .channel_config import (
    DeliveryTiming,
    EmailChannelConfig,
    PushChannelConfig,
    SmsChannelConfig,
)
from .errors import PreconditionFailure, ProviderFailure, ProviderUnavailable
from .models import (
    Channel,
    ChannelOutcome,
    ExpoPushToken,
    Provider,
    RenderedMessage,
    Severity,
)

logger = get_logger(__name__)

SEVERITY_COLORS = {
    Severity.CRITICAL: "#cc0000",
    Severity.HIGH: "#ff4500",
    Severity.MEDIUM: "#ffa500",
    Severity.LOW: "#ffcc00",
}


class ChannelAdapterProtocol(Protocol):
    """Protocol for channel adapter implementations."""

    channel: Channel

    async def send(
        self,
        address: Any,
        message: RenderedMessage,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ChannelOutcome:
        """Send one notification to one recipient over this channel."""
        ...


class BaseChannelAdapter(ABC):
    """
    Shared send flow for all channels.

    A send either fails its address precondition without touching the
    provider, goes out through the live provider, or falls back to a
    simulated delivery when the provider is missing, raises or times out.
    """

    channel: Channel
    provider: Provider
    provider_name: str

    def __init__(self, timing: DeliveryTiming):
        self.timing = timing
        self.logger = logger.bind(channel=self.channel.value)

    @property
    @abstractmethod
    def is_live(self) -> bool:
        """Whether a real provider client is configured."""

    async def send(
        self,
        address: Any,
        message: RenderedMessage,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ChannelOutcome:
        """
        Send a notification and return a normalized outcome.

        Args:
            address: Channel-specific address (email, E.164 number, push token)
            message: Rendered alert content
            metadata: Alert context (alert_id, recipient_id, severity)

        Returns:
            ChannelOutcome; never raises for delivery problems
        """
        metadata = metadata or {}
        start_time = time.perf_counter()

        try:
            self._check_address(address)
        except PreconditionFailure as e:
            outcome = ChannelOutcome(
                success=False, reason=PreconditionFailure.reason, error=str(e)
            )
            self._log_attempt(outcome, metadata)
            return outcome

        try:
            unavailable = self._unavailable_reason(address)
            if unavailable:
                raise ProviderUnavailable(unavailable)

            message_id = await asyncio.wait_for(
                self._deliver(address, message, metadata),
                timeout=self.timing.timeout_seconds,
            )
            outcome = ChannelOutcome(
                success=True, provider=self.provider, message_id=message_id
            )

        except ProviderUnavailable as e:
            outcome = await self._simulate(str(e))

        except asyncio.TimeoutError:
            failure = ProviderFailure(
                f"{self.provider_name} error: no response within "
                f"{self.timing.timeout_seconds}s"
            )
            outcome = await self._simulate(str(failure))

        except Exception as e:
            failure = ProviderFailure(f"{self.provider_name} error: {e}")
            self.logger.warning(
                "Provider send failed, falling back to simulation",
                provider=self.provider.value,
                error=str(e),
                exc_info=True,
                **metadata,
            )
            outcome = await self._simulate(str(failure))

        outcome.delivery_time_ms = (time.perf_counter() - start_time) * 1000
        self._log_attempt(outcome, metadata)
        return outcome

    def _check_address(self, address: Any) -> None:
        if not is_valid_address(self.channel, address):
            raise PreconditionFailure(
                f"Recipient has no usable {self.channel.value} address"
            )

    def _unavailable_reason(self, address: Any) -> Optional[str]:
        if not self.is_live:
            return f"{self.provider_name} not configured"
        return None

    @abstractmethod
    async def _deliver(
        self, address: Any, message: RenderedMessage, metadata: Dict[str, Any]
    ) -> Optional[str]:
        """Send through the live provider and return its message id."""

    async def _simulate(self, reason: str) -> ChannelOutcome:
        """Record a would-be send and return a degraded success."""
        self.logger.info("Simulating delivery", reason=reason)
        await asyncio.sleep(self.timing.simulation_delay_seconds)
        return ChannelOutcome(success=True, provider=Provider.SIMULATED, reason=reason)

    def _log_attempt(self, outcome: ChannelOutcome, metadata: Dict[str, Any]) -> None:
        log = self.logger.info if outcome.success else self.logger.warning
        log(
            "Channel delivery attempted",
            success=outcome.success,
            provider=outcome.provider.value if outcome.provider else None,
            reason=outcome.reason,
            delivery_time_ms=outcome.delivery_time_ms,
            **metadata,
        )


class EmailChannelAdapter(BaseChannelAdapter):
    """Email delivery through SendGrid."""

    channel = Channel.EMAIL
    provider = Provider.SENDGRID
    provider_name = "SendGrid"

    def __init__(self, config: EmailChannelConfig, client: Optional[SendGridClient] = None):
        super().__init__(config.timing)
        self.config = config
        if client is None and config.is_live:
            client = SendGridClient(config.api_key, config.from_email)
        self.client = client

    @property
    def is_live(self) -> bool:
        return self.client is not None

    async def _deliver(self, address, message, metadata):
        return await self.client.send_email(
            to=address,
            subject=f"ALERT: {message.title}",
            text=message.body,
            html=self._format_html(message),
        )

    def _format_html(self, message: RenderedMessage) -> str:
        color = SEVERITY_COLORS.get(message.severity, "#999999")
        return (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            f'<div style="background-color: {color}; padding: 15px; text-align: center;">'
            f'<h1 style="color: white; margin: 0;">{html.escape(message.title)}</h1>'
            f'<p style="color: white; margin: 5px 0 0;">Severity: '
            f"{message.severity.value.upper()}</p></div>"
            '<div style="padding: 20px; border: 1px solid #ddd; border-top: none;">'
            f'<p style="font-size: 16px; line-height: 1.5;">{html.escape(message.body)}</p>'
            '<p style="font-size: 14px; color: #777;">This is an automated emergency '
            "alert. Please follow all instructions carefully.</p></div></div>"
        )


class SmsChannelAdapter(BaseChannelAdapter):
    """SMS delivery through Twilio."""

    channel = Channel.SMS
    provider = Provider.TWILIO
    provider_name = "Twilio"

    def __init__(self, config: SmsChannelConfig, client: Optional[TwilioClient] = None):
        super().__init__(config.timing)
        self.config = config
        if client is None and config.is_live:
            client = TwilioClient(config.account_sid, config.auth_token, config.from_number)
        self.client = client

    @property
    def is_live(self) -> bool:
        return self.client is not None

    async def _deliver(self, address, message, metadata):
        return await self.client.send_sms(to=address, body=self.format_sms(message))

    @staticmethod
    def format_sms(message: RenderedMessage) -> str:
        return f"ALERT [{message.severity.value.upper()}]: {message.title} - {message.body}"


class PushChannelAdapter(BaseChannelAdapter):
    """Push delivery; Expo tokens go to Expo, other token kinds are simulated."""

    channel = Channel.PUSH
    provider = Provider.EXPO
    provider_name = "Expo"

    def __init__(self, config: PushChannelConfig, client: Optional[ExpoPushClient] = None):
        super().__init__(config.timing)
        self.config = config
        if client is None and config.is_live:
            client = ExpoPushClient(config.access_token)
        self.client = client

    @property
    def is_live(self) -> bool:
        return self.client is not None

    def _unavailable_reason(self, address) -> Optional[str]:
        if not isinstance(address, ExpoPushToken):
            return f"No push provider configured for {address.kind.value} tokens"
        return super()._unavailable_reason(address)

    async def _deliver(self, address, message, metadata):
        return await self.client.send_push(
            token=address.value,
            title=f"ALERT: {message.title}",
            body=message.body,
            data={
                "alertId": metadata.get("alert_id"),
                "severity": message.severity.value,
            },
        )
