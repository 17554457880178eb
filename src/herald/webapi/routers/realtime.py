"""WebSocket endpoint for real-time alert events."""

from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from ...config.logging import get_logger
from ...config.settings import get_settings
from ...events import role_topic, user_topic
from ...realtime.hub import get_realtime_hub

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    user_id: Optional[int] = Query(None),
    role: Optional[str] = Query(None),
    token: Optional[str] = Query(None),
):
    """
    Join ``user:<id>`` and ``role:<role>`` topics and receive events.

    Messages are ``{"event": name, "payload": {...}}``. Delivery is best
    effort; clients that miss events should re-fetch over HTTP.
    """
    expected_token = get_settings().endpoint_auth_token
    if expected_token and token != expected_token:
        logger.warning("Rejected realtime connection with invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    topics = []
    if user_id is not None:
        topics.append(user_topic(user_id))
    if role:
        topics.append(role_topic(role))

    await websocket.accept()

    hub = get_realtime_hub()
    connection = hub.register(websocket, topics)
    await websocket.send_json(
        {
            "event": "connected",
            "payload": {
                "connectionId": connection.connection_id,
                "topics": sorted(connection.topics),
            },
        }
    )

    try:
        # Inbound messages are ignored; the socket only listens
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        hub.unregister(connection.connection_id)
