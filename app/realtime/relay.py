"""
Process-local pub/sub for application chat rooms.

This is the fast path for chat: connections join ``application_<id>``
rooms and a published message is pushed to every other connection in
the room. Delivery is at-most-once with no history; the durable copy is
the Message row that clients re-fetch, so a dropped push is never a
lost message.
"""
import logging
import uuid
from typing import Any, Dict, Optional, Protocol, Set

logger = logging.getLogger(__name__)


def room_name(application_id: Any) -> str:
    return f"application_{application_id}"


class Sender(Protocol):
    async def send_json(self, data: Any) -> None: ...


class RelayConnection:
    """One client connection; ``sender`` is usually a WebSocket"""

    def __init__(self, sender: Sender, connection_id: Optional[str] = None):
        self.sender = sender
        self.id = connection_id or uuid.uuid4().hex

    async def send(self, event: str, data: Any, ack: Optional[str] = None) -> None:
        frame = {"event": event, "data": data}
        if ack is not None:
            frame["ack"] = ack
        await self.sender.send_json(frame)

    def __repr__(self) -> str:
        return f"RelayConnection({self.id})"


class RelayHub:
    def __init__(self):
        self._rooms: Dict[str, Set[RelayConnection]] = {}
        self._memberships: Dict[str, Set[str]] = {}

    def join(self, connection: RelayConnection, application_id: Any) -> str:
        room = room_name(application_id)
        self._rooms.setdefault(room, set()).add(connection)
        self._memberships.setdefault(connection.id, set()).add(room)
        logger.info("Connection %s joined room %s", connection.id, room)
        return room

    def disconnect(self, connection: RelayConnection) -> None:
        """Drop the connection from every room it joined"""
        for room in self._memberships.pop(connection.id, set()):
            members = self._rooms.get(room)
            if members is None:
                continue
            members.discard(connection)
            if not members:
                del self._rooms[room]
        logger.info("Connection %s left all rooms", connection.id)

    def members(self, application_id: Any) -> Set[RelayConnection]:
        return set(self._rooms.get(room_name(application_id), set()))

    def rooms_of(self, connection: RelayConnection) -> Set[str]:
        return set(self._memberships.get(connection.id, set()))

    async def publish(self, sender: RelayConnection, application_id: Any, message: Any) -> int:
        """
        Push ``message`` to every other connection in the room.

        Returns the number of peers that accepted the frame. A peer whose
        send fails is dropped from the hub.
        """
        delivered = 0
        for peer in self.members(application_id):
            if peer.id == sender.id:
                continue
            try:
                await peer.send("receive_message", message)
                delivered += 1
            except Exception:
                logger.warning("Dropping connection %s after failed send", peer.id, exc_info=True)
                self.disconnect(peer)

        logger.info(
            "Relayed message to %d peer(s) in %s",
            delivered, room_name(application_id)
        )
        return delivered


hub = RelayHub()
