"""Real-time event delivery to connected clients."""

from .hub import Connection, RealtimeHub, get_realtime_hub, set_realtime_hub

__all__ = ["Connection", "RealtimeHub", "get_realtime_hub", "set_realtime_hub"]
