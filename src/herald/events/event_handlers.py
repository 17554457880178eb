"""Event handlers for processing domain events."""

from abc import ABC, abstractmethod
from typing import Optional

from ..config.logging import get_logger
from ..realtime.hub import RealtimeHub, get_realtime_hub
from .event_bus import EventBus
from .events import DomainEvent, RealtimeEvent

logger = get_logger(__name__)


class EventHandler(ABC):
    """Base class for event handlers."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logger.bind(handler=name)

    @abstractmethod
    async def handle(self, event: DomainEvent):
        """Handle the domain event."""
        pass

    async def __call__(self, event: DomainEvent):
        await self.handle(event)


class RealtimeBroadcastHandler(EventHandler):
    """Forwards realtime events to connected WebSocket clients."""

    def __init__(self, hub: Optional[RealtimeHub] = None):
        super().__init__("realtime_broadcast_handler")
        self._hub = hub

    @property
    def hub(self) -> RealtimeHub:
        return self._hub or get_realtime_hub()

    async def handle(self, event: DomainEvent):
        if not isinstance(event, RealtimeEvent) or not event.topics:
            return

        delivered = await self.hub.publish(event.topics, event.realtime_name, event.payload)

        self.logger.debug(
            "Realtime event broadcast",
            event_name=event.realtime_name,
            event_id=event.event_id,
            topics=event.topics,
            delivered=delivered,
        )


def register_default_handlers(
    event_bus: EventBus, hub: Optional[RealtimeHub] = None
) -> RealtimeBroadcastHandler:
    """Wire the realtime broadcaster into an event bus."""
    handler = RealtimeBroadcastHandler(hub)
    event_bus.subscribe(RealtimeEvent, handler)
    return handler
