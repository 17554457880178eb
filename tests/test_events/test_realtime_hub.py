"""Tests for topic-based realtime broadcast."""

import sys
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.append("src")

from herald.realtime import RealtimeHub, get_realtime_hub, set_realtime_hub


def socket(error=None):
    ws = Mock()
    ws.send_json = AsyncMock(side_effect=error)
    return ws


class TestRealtimeHub:
    @pytest.mark.asyncio
    async def test_publish_reaches_topic_subscribers_only(self):
        hub = RealtimeHub()
        alice, bob = socket(), socket()
        hub.register(alice, ["user:1", "role:admin"])
        hub.register(bob, ["user:2"])

        delivered = await hub.publish(["user:1"], "newAlert", {"alertId": 3})

        assert delivered == 1
        alice.send_json.assert_awaited_once_with(
            {"event": "newAlert", "payload": {"alertId": 3}}
        )
        bob.send_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_on_several_topics_gets_one_message(self):
        hub = RealtimeHub()
        admin = socket()
        hub.register(admin, ["user:1", "role:admin"])

        delivered = await hub.publish(["role:admin", "user:1"], "alertAcknowledged", {})

        assert delivered == 1
        assert admin.send_json.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_send_drops_connection(self):
        hub = RealtimeHub()
        dead = socket(error=RuntimeError("socket closed"))
        alive = socket()
        dead_conn = hub.register(dead, ["role:admin"])
        hub.register(alive, ["role:admin"])

        delivered = await hub.publish(["role:admin"], "alertCancelled", {"alertId": 1})

        assert delivered == 1
        assert dead_conn.connection_id not in hub.subscribers("role:admin")
        assert hub.connection_count == 1

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        assert await RealtimeHub().publish(["user:404"], "newAlert", {}) == 0

    def test_unregister_cleans_up_topics(self):
        hub = RealtimeHub()
        conn = hub.register(socket(), ["user:1"])

        assert hub.unregister(conn.connection_id) is True
        assert hub.unregister(conn.connection_id) is False
        assert hub.subscribers("user:1") == set()
        assert hub.connection_count == 0

    def test_global_hub(self):
        hub = RealtimeHub()
        set_realtime_hub(hub)
        assert get_realtime_hub() is hub
