"""Event bus for managing and dispatching domain events."""

import asyncio
import inspect
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Type

from ..config.logging import get_logger
from .events import DomainEvent

logger = get_logger(__name__)


class EventBus:
    """Event bus for publishing and subscribing to domain events."""

    def __init__(self, name: str = "default"):
        self.name = name
        self.logger = logger.bind(event_bus=name)

        # Event handlers registry: event_type -> list of handlers
        self._handlers: Dict[Type[DomainEvent], List[Callable]] = defaultdict(list)

        # Fire-and-forget handler tasks still running
        self._background_tasks: Set[asyncio.Task] = set()

        self._stats = {
            "events_published": 0,
            "handlers_executed": 0,
            "errors_count": 0,
            "last_event_time": None,
        }

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> None:
        """
        Subscribe a handler to an event type.

        Handlers registered for a base class also receive its subclasses.

        Args:
            event_type: Type of event to subscribe to
            handler: Handler function (sync or async)
        """
        self._handlers[event_type].append(handler)

        self.logger.info(
            "Event handler subscribed",
            event_type=event_type.__name__,
            handler=getattr(handler, "__name__", type(handler).__name__),
            total_handlers=len(self._handlers[event_type]),
        )

    def unsubscribe(self, event_type: Type[DomainEvent], handler: Callable) -> bool:
        """
        Unsubscribe a handler from an event type.

        Returns:
            True if handler was found and removed
        """
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)
            return True
        return False

    def _handlers_for(self, event: DomainEvent) -> List[Callable]:
        handlers = []
        for event_type in type(event).__mro__:
            handlers.extend(self._handlers.get(event_type, []))
        return handlers

    async def publish(
        self, event: DomainEvent, wait_for_handlers: bool = False
    ) -> Dict[str, Any]:
        """
        Publish an event to all subscribed handlers.

        Args:
            event: Domain event to publish
            wait_for_handlers: Whether to wait for all handlers to complete

        Returns:
            Dictionary with publication results
        """
        self._stats["events_published"] += 1
        self._stats["last_event_time"] = datetime.utcnow()

        handlers = self._handlers_for(event)

        self.logger.debug(
            "Publishing event",
            event_type=type(event).__name__,
            event_id=event.event_id,
            handlers=len(handlers),
            wait_for_handlers=wait_for_handlers,
        )

        if not handlers:
            return {
                "event_id": event.event_id,
                "handlers_executed": 0,
                "successful_handlers": 0,
                "failed_handlers": 0,
            }

        tasks = [asyncio.create_task(self._run_handler(h, event)) for h in handlers]
        self._stats["handlers_executed"] += len(tasks)

        if not wait_for_handlers:
            for task in tasks:
                self._background_tasks.add(task)
                task.add_done_callback(self._background_tasks.discard)
            return {
                "event_id": event.event_id,
                "handlers_executed": len(tasks),
                "successful_handlers": len(tasks),
                "failed_handlers": 0,
            }

        results = await asyncio.gather(*tasks)
        successful = sum(1 for ok in results if ok)

        return {
            "event_id": event.event_id,
            "handlers_executed": len(tasks),
            "successful_handlers": successful,
            "failed_handlers": len(tasks) - successful,
        }

    async def _run_handler(self, handler: Callable, event: DomainEvent) -> bool:
        """Run one handler, logging instead of raising on failure."""
        try:
            if inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
                getattr(handler, "__call__", None)
            ):
                await handler(event)
            else:
                result = await asyncio.to_thread(handler, event)
                if inspect.isawaitable(result):
                    await result
            return True
        except Exception as e:
            self._stats["errors_count"] += 1
            self.logger.error(
                "Handler execution failed",
                event_type=type(event).__name__,
                handler=getattr(handler, "__name__", type(handler).__name__),
                error=str(e),
                exc_info=True,
            )
            return False

    async def drain(self) -> None:
        """Wait for outstanding fire-and-forget handlers."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    def get_statistics(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {
            **self._stats,
            "pending_handlers": len(self._background_tasks),
            "handlers_by_event_type": {
                event_type.__name__: len(handlers)
                for event_type, handlers in self._handlers.items()
            },
        }


# Global event bus instance
_global_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get or create the global event bus instance."""
    global _global_event_bus

    if _global_event_bus is None:
        _global_event_bus = EventBus("global")

    return _global_event_bus


def set_event_bus(event_bus: Optional[EventBus]):
    """Set the global event bus instance."""
    global _global_event_bus
    _global_event_bus = event_bus
