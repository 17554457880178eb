"""Topic-based fan-out of real-time events to WebSocket clients."""

import asyncio
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set

from ..config.logging import get_logger

logger = get_logger(__name__)


class SupportsSendJson(Protocol):
    async def send_json(self, data: Any) -> None: ...


@dataclass
class Connection:
    """A connected client and the topics it listens on."""

    socket: SupportsSendJson
    topics: Set[str] = field(default_factory=set)
    connection_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    connected_at: datetime = field(default_factory=datetime.utcnow)


class RealtimeHub:
    """
    Best-effort broadcast of events to subscribed connections.

    No delivery guarantee, no retry and no ordering across events; a
    connection whose send fails is dropped.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._topics: Dict[str, Set[str]] = defaultdict(set)
        self.logger = logger.bind(component="realtime_hub")

    def register(self, socket: SupportsSendJson, topics: Iterable[str]) -> Connection:
        """Track a connection and subscribe it to ``topics``."""
        connection = Connection(socket=socket, topics=set(topics))
        self._connections[connection.connection_id] = connection
        for topic in connection.topics:
            self._topics[topic].add(connection.connection_id)

        self.logger.info(
            "Client connected",
            connection_id=connection.connection_id,
            topics=sorted(connection.topics),
        )
        return connection

    def unregister(self, connection_id: str) -> bool:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return False

        for topic in connection.topics:
            subscribers = self._topics.get(topic)
            if subscribers is not None:
                subscribers.discard(connection_id)
                if not subscribers:
                    del self._topics[topic]

        self.logger.info("Client disconnected", connection_id=connection_id)
        return True

    def subscribers(self, topic: str) -> Set[str]:
        return set(self._topics.get(topic, set()))

    async def publish(self, topics: Iterable[str], event: str, payload: Dict[str, Any]) -> int:
        """
        Send ``{"event", "payload"}`` once to every connection on any topic.

        Returns:
            Number of connections the message was handed to
        """
        targets: List[str] = sorted(
            {cid for topic in topics for cid in self._topics.get(topic, set())}
        )
        if not targets:
            return 0

        message = {"event": event, "payload": payload}
        results = await asyncio.gather(
            *(self._send(cid, message) for cid in targets), return_exceptions=True
        )
        delivered = sum(1 for r in results if r is True)

        self.logger.debug(
            "Realtime event published", event_name=event, targets=len(targets), delivered=delivered
        )
        return delivered

    async def _send(self, connection_id: str, message: Dict[str, Any]) -> bool:
        connection: Optional[Connection] = self._connections.get(connection_id)
        if connection is None:
            return False
        try:
            await connection.socket.send_json(message)
            return True
        except Exception as e:
            self.logger.warning(
                "Dropping connection after failed send",
                connection_id=connection_id,
                error=str(e),
            )
            self.unregister(connection_id)
            return False

    @property
    def connection_count(self) -> int:
        return len(self._connections)


_hub: Optional[RealtimeHub] = None


def get_realtime_hub() -> RealtimeHub:
    """Get or create the process-wide hub."""
    global _hub

    if _hub is None:
        _hub = RealtimeHub()

    return _hub


def set_realtime_hub(hub: Optional[RealtimeHub]) -> None:
    global _hub
    _hub = hub
