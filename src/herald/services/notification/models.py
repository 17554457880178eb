"""Data models for alert dispatch and delivery tracking."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class Severity(Enum):
    """Alert severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Channel(Enum):
    """Available notification channels."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class AlertStatus(Enum):
    """Alert lifecycle states."""

    PENDING = "pending"
    SENT = "sent"
    CANCELLED = "cancelled"
    FAILED = "failed"


class Provider(Enum):
    """Tags identifying who handled a delivery attempt."""

    SENDGRID = "sendgrid"
    TWILIO = "twilio"
    EXPO = "expo"
    SIMULATED = "simulated"


class PushTokenKind(Enum):
    """Push token families, decided when the token is registered."""

    EXPO = "expo"
    OTHER = "other"


@dataclass(frozen=True)
class ExpoPushToken:
    """Token issued by the Expo push service."""

    value: str
    kind = PushTokenKind.EXPO


@dataclass(frozen=True)
class OtherPushToken:
    """Token for a push service without a configured provider (FCM, APNs, ...)."""

    value: str
    kind = PushTokenKind.OTHER


PushToken = Union[ExpoPushToken, OtherPushToken]


@dataclass(frozen=True)
class Targeting:
    """Which users an alert is addressed to.

    The three criteria are independent; a user matched by more than one of
    them is still a single recipient.
    """

    all: bool = False
    roles: Tuple[str, ...] = ()
    specific: Tuple[int, ...] = ()

    @property
    def is_satisfiable(self) -> bool:
        """Whether at least one criterion can select anybody."""
        return self.all or bool(self.roles) or bool(self.specific)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Targeting":
        data = data or {}
        return cls(
            all=bool(data.get("all", False)),
            roles=tuple(dict.fromkeys(data.get("roles") or [])),
            specific=tuple(dict.fromkeys(int(i) for i in data.get("specific") or [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"all": self.all, "roles": list(self.roles), "specific": list(self.specific)}


@dataclass(frozen=True)
class Recipient:
    """The parts of a user that matter for delivering an alert."""

    id: int
    role: str
    channels: Mapping[Channel, bool]
    email: Optional[str] = None
    phone_number: Optional[str] = None
    push_token: Optional[PushToken] = None

    def address_for(self, channel: Channel) -> Optional[Union[str, PushToken]]:
        """Channel-specific address, if the user has one."""
        if channel is Channel.EMAIL:
            return self.email
        if channel is Channel.SMS:
            return self.phone_number
        return self.push_token

    def has_enabled(self, channel: Channel) -> bool:
        return bool(self.channels.get(channel, False))


@dataclass(frozen=True)
class OutgoingAlert:
    """An alert as the dispatcher sees it."""

    id: int
    title: str
    message: str
    severity: Severity
    channels: Tuple[Channel, ...]
    created_by: Optional[int] = None

    @classmethod
    def from_record(cls, record: Any) -> "OutgoingAlert":
        """Build from an ORM alert row."""
        return cls(
            id=record.id,
            title=record.title,
            message=record.message,
            severity=Severity(record.severity),
            channels=tuple(Channel(c) for c in dict.fromkeys(record.channels or [])),
            created_by=record.created_by,
        )


@dataclass(frozen=True)
class RenderedMessage:
    """Channel-neutral message content handed to each adapter."""

    title: str
    body: str
    severity: Severity


@dataclass
class ChannelOutcome:
    """Normalized result of one adapter send."""

    success: bool
    provider: Optional[Provider] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    message_id: Optional[str] = None
    delivery_time_ms: float = 0.0

    @property
    def simulated(self) -> bool:
        return self.provider is Provider.SIMULATED


@dataclass
class DeliveryAttempt:
    """One (recipient, channel) delivery attempt produced by the dispatcher."""

    recipient_id: int
    channel: Channel
    success: bool
    provider: Optional[Provider] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    message_id: Optional[str] = None

    @classmethod
    def from_outcome(
        cls, recipient_id: int, channel: Channel, outcome: ChannelOutcome
    ) -> "DeliveryAttempt":
        return cls(
            recipient_id=recipient_id,
            channel=channel,
            success=outcome.success,
            provider=outcome.provider,
            reason=outcome.reason,
            error=outcome.error,
            message_id=outcome.message_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient_id": self.recipient_id,
            "channel": self.channel.value,
            "success": self.success,
            "provider": self.provider.value if self.provider else None,
            "reason": self.reason,
            "error": self.error,
            "message_id": self.message_id,
        }


@dataclass(frozen=True)
class DeliveryStats:
    """Alert-level delivery counters.

    ``total == sent + failed + pending`` always holds.
    """

    total: int = 0
    sent: int = 0
    failed: int = 0
    pending: int = 0

    def __post_init__(self):
        if self.total != self.sent + self.failed + self.pending:
            raise ValueError(
                f"Inconsistent delivery stats: total={self.total} "
                f"sent={self.sent} failed={self.failed} pending={self.pending}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, int]]) -> "DeliveryStats":
        data = data or {}
        return cls(
            total=data.get("total", 0),
            sent=data.get("sent", 0),
            failed=data.get("failed", 0),
            pending=data.get("pending", 0),
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class DispatchReport:
    """Everything a dispatch run produced."""

    alert_id: int
    recipients: List[Recipient]
    attempts: List[DeliveryAttempt]
    stats: DeliveryStats
    status: AlertStatus
    completed_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def simulated_count(self) -> int:
        return sum(1 for a in self.attempts if a.provider is Provider.SIMULATED)


@dataclass
class AcknowledgmentResult:
    """Outcome of an acknowledgment request."""

    created: bool
    record: Any
    total: int
