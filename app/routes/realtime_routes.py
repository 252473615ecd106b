"""
WebSocket endpoint for the chat relay.

Frames are JSON objects ``{"event", "data", "ack"}``. The relay only
pushes messages that were already stored through ``POST /api/messages``;
it never writes to the database.
"""
import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.realtime.relay import RelayConnection, hub
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _timestamp() -> str:
    return utcnow().isoformat()


async def _handle_join(conn: RelayConnection, data: Any, ack: Optional[str]) -> None:
    if data is None or isinstance(data, (dict, list)):
        await conn.send("error", {"message": "join_application expects an application id"}, ack)
        return
    room = hub.join(conn, data)
    await conn.send("room_joined", {"room": room, "success": True, "timestamp": _timestamp()}, ack)


async def _handle_send(conn: RelayConnection, data: Any, ack: Optional[str]) -> None:
    if not isinstance(data, dict) or data.get("application_id") is None or not isinstance(data.get("message"), dict):
        await conn.send("message_error", {"success": False, "error": "Invalid message payload"}, ack)
        return

    message = data["message"]
    delivered = await hub.publish(conn, data["application_id"], message)
    await conn.send(
        "message_sent",
        {
            "success": True,
            "message_id": message.get("id"),
            "delivered": delivered,
            "timestamp": _timestamp(),
        },
        ack
    )


async def _handle_ping(conn: RelayConnection, data: Any, ack: Optional[str]) -> None:
    await conn.send("pong", {"time": int(time.time() * 1000), "connection_id": conn.id}, ack)


HANDLERS = {
    "join_application": _handle_join,
    "send_message": _handle_send,
    "ping": _handle_ping,
}


@router.websocket("/ws")
async def relay_socket(websocket: WebSocket):
    """Connections are anonymous; rooms only carry messages already stored over HTTP"""
    await websocket.accept()

    conn = RelayConnection(websocket)
    logger.info("Relay connection %s opened", conn.id)

    try:
        await conn.send("connected", {"connection_id": conn.id})

        while True:
            try:
                frame = await websocket.receive_json()
            except ValueError:
                await conn.send("error", {"message": "Frames must be JSON"})
                continue

            if not isinstance(frame, dict):
                await conn.send("error", {"message": "Frames must be JSON objects"})
                continue

            event = frame.get("event")
            ack = frame.get("ack")
            handler = HANDLERS.get(event)
            if handler is None:
                await conn.send("error", {"message": f"Unknown event: {event}"}, ack)
                continue

            await handler(conn, frame.get("data"), ack)
    except WebSocketDisconnect:
        logger.info("Relay connection %s closed", conn.id)
    finally:
        hub.disconnect(conn)
