"""Fan-out of an alert across recipients and channels."""

import asyncio
from typing import Dict, List, Mapping, Sequence, Tuple

from ...config.logging import get_logger
from .channel_config import ChannelSettings
from .channels import (
    ChannelAdapterProtocol,
    EmailChannelAdapter,
    PushChannelAdapter,
    SmsChannelAdapter,
)
from .models import Channel, DeliveryAttempt, OutgoingAlert, Recipient, RenderedMessage
from .recipients import is_eligible

logger = get_logger(__name__)


def render_message(alert: OutgoingAlert) -> RenderedMessage:
    return RenderedMessage(title=alert.title, body=alert.message, severity=alert.severity)


class Dispatcher:
    """Sends an alert to every eligible (recipient, channel) pair concurrently."""

    def __init__(self, adapters: Mapping[Channel, ChannelAdapterProtocol]):
        self.adapters: Dict[Channel, ChannelAdapterProtocol] = dict(adapters)
        self.logger = logger.bind(component="dispatcher")

    @classmethod
    def from_channel_settings(cls, channel_settings: ChannelSettings) -> "Dispatcher":
        return cls(
            {
                Channel.EMAIL: EmailChannelAdapter(channel_settings.email),
                Channel.SMS: SmsChannelAdapter(channel_settings.sms),
                Channel.PUSH: PushChannelAdapter(channel_settings.push),
            }
        )

    def plan(
        self, alert: OutgoingAlert, recipients: Sequence[Recipient]
    ) -> List[Tuple[Recipient, Channel]]:
        """Every (recipient, channel) pair that will get a send."""
        return [
            (recipient, channel)
            for recipient in recipients
            for channel in alert.channels
            if channel in self.adapters and is_eligible(recipient, channel)
        ]

    async def dispatch(
        self, alert: OutgoingAlert, recipients: Sequence[Recipient]
    ) -> List[DeliveryAttempt]:
        """
        Deliver an alert and wait for every send to settle.

        Args:
            alert: Alert to deliver
            recipients: Resolved recipients

        Returns:
            One DeliveryAttempt per eligible (recipient, channel) pair
        """
        pairs = self.plan(alert, recipients)

        self.logger.info(
            "Dispatching alert",
            alert_id=alert.id,
            severity=alert.severity.value,
            channels=[c.value for c in alert.channels],
            recipient_count=len(recipients),
            planned_attempts=len(pairs),
        )

        if not pairs:
            return []

        message = render_message(alert)
        results = await asyncio.gather(
            *(self._send(alert, message, recipient, channel) for recipient, channel in pairs),
            return_exceptions=True,
        )

        attempts = []
        for (recipient, channel), result in zip(pairs, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                self.logger.error(
                    "Channel adapter raised unexpectedly",
                    alert_id=alert.id,
                    recipient_id=recipient.id,
                    channel=channel.value,
                    error=str(result),
                    exc_info=result,
                )
                result = DeliveryAttempt(
                    recipient_id=recipient.id,
                    channel=channel,
                    success=False,
                    reason="adapter_error",
                    error=str(result),
                )
            attempts.append(result)

        successful = sum(1 for a in attempts if a.success)
        self.logger.info(
            "Alert dispatch completed",
            alert_id=alert.id,
            successful_deliveries=successful,
            total_attempts=len(attempts),
            success_rate=successful / len(attempts),
        )
        return attempts

    async def _send(
        self,
        alert: OutgoingAlert,
        message: RenderedMessage,
        recipient: Recipient,
        channel: Channel,
    ) -> DeliveryAttempt:
        outcome = await self.adapters[channel].send(
            recipient.address_for(channel),
            message,
            {
                "alert_id": alert.id,
                "recipient_id": recipient.id,
                "severity": alert.severity.value,
            },
        )
        return DeliveryAttempt.from_outcome(recipient.id, channel, outcome)

    def channel_status(self) -> Dict[str, Dict[str, object]]:
        """Whether each channel is live or running in simulation mode."""
        return {
            channel.value: {
                "live": bool(getattr(adapter, "is_live", False)),
                "implementation": type(adapter).__name__,
            }
            for channel, adapter in self.adapters.items()
        }
