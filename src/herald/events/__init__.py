"""Event-driven architecture components."""

from .event_bus import EventBus, get_event_bus, set_event_bus
from .event_handlers import (
    EventHandler,
    RealtimeBroadcastHandler,
    register_default_handlers,
)
from .events import (
    AlertAcknowledgedEvent,
    AlertCancelledEvent,
    DomainEvent,
    NewAlertEvent,
    RealtimeEvent,
    role_topic,
    user_topic,
)

__all__ = [
    # Events
    "DomainEvent",
    "RealtimeEvent",
    "NewAlertEvent",
    "AlertAcknowledgedEvent",
    "AlertCancelledEvent",
    "user_topic",
    "role_topic",
    # Event Bus
    "EventBus",
    "get_event_bus",
    "set_event_bus",
    # Event Handlers
    "EventHandler",
    "RealtimeBroadcastHandler",
    "register_default_handlers",
]
