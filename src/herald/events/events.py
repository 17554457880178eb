"""Domain events for the alerting system."""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional
from uuid import uuid4


@dataclass
class DomainEvent(ABC):
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.utcnow)
    event_version: str = "1.0"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result = {
            "event_type": self.__class__.__name__,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "event_version": self.event_version,
            "metadata": self.metadata,
        }

        for field_name, field_value in self.__dict__.items():
            if field_name not in ["event_id", "timestamp", "event_version", "metadata"]:
                if isinstance(field_value, datetime):
                    result[field_name] = field_value.isoformat()
                else:
                    result[field_name] = field_value

        return result


@dataclass
class RealtimeEvent(DomainEvent):
    """Event that connected clients hear about on the listed topics."""

    realtime_name: ClassVar[str] = ""

    topics: List[str] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NewAlertEvent(RealtimeEvent):
    """An alert finished dispatching."""

    realtime_name: ClassVar[str] = "newAlert"

    alert_id: int = 0
    status: str = ""


@dataclass
class AlertAcknowledgedEvent(RealtimeEvent):
    """A user acknowledged an alert for the first time."""

    realtime_name: ClassVar[str] = "alertAcknowledged"

    alert_id: int = 0
    user_id: int = 0
    total_acknowledgments: int = 0


@dataclass
class AlertCancelledEvent(RealtimeEvent):
    """An alert was cancelled."""

    realtime_name: ClassVar[str] = "alertCancelled"

    alert_id: int = 0
    cancelled_by: Optional[int] = None


def user_topic(user_id: Any) -> str:
    return f"user:{user_id}"


def role_topic(role: str) -> str:
    return f"role:{role}"
