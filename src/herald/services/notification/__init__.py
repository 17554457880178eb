"""Alert dispatch and delivery tracking."""

from .acknowledgments import AcknowledgmentTracker
from .addresses import is_valid_address, parse_push_token
from .channel_config import (
    ChannelSettings,
    DeliveryTiming,
    EmailChannelConfig,
    PushChannelConfig,
    SmsChannelConfig,
)
from .channels import (
    BaseChannelAdapter,
    ChannelAdapterProtocol,
    EmailChannelAdapter,
    PushChannelAdapter,
    SmsChannelAdapter,
)
from .dispatcher import Dispatcher
from .models import (
    AcknowledgmentResult,
    AlertStatus,
    Channel,
    ChannelOutcome,
    DeliveryAttempt,
    DeliveryStats,
    DispatchReport,
    ExpoPushToken,
    OtherPushToken,
    OutgoingAlert,
    Provider,
    PushTokenKind,
    Recipient,
    RenderedMessage,
    Severity,
    Targeting,
)
from .recipients import RecipientResolver, is_eligible
from .service import AlertService
from .stats import final_status, reduce_attempts, summarize_alerts

__all__ = [
    "AcknowledgmentResult",
    "AcknowledgmentTracker",
    "AlertService",
    "AlertStatus",
    "Channel",
    "ChannelAdapterProtocol",
    "ChannelOutcome",
    "ChannelSettings",
    "DeliveryAttempt",
    "DeliveryStats",
    "DeliveryTiming",
    "Dispatcher",
    "DispatchReport",
    "BaseChannelAdapter",
    "EmailChannelAdapter",
    "EmailChannelConfig",
    "ExpoPushToken",
    "OtherPushToken",
    "OutgoingAlert",
    "Provider",
    "PushChannelAdapter",
    "PushChannelConfig",
    "PushTokenKind",
    "Recipient",
    "RecipientResolver",
    "RenderedMessage",
    "Severity",
    "SmsChannelAdapter",
    "SmsChannelConfig",
    "Targeting",
    "final_status",
    "is_eligible",
    "is_valid_address",
    "parse_push_token",
    "reduce_attempts",
    "summarize_alerts",
]
