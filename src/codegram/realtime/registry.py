"""Process-local bookkeeping of live connections and their rooms."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from codegram.db.time import utcnow

from .events import RealtimeMessage
from .rate_limit import ConnectionRateLimiter


@dataclass(eq=False)
class Connection:
    """One live socket.

    ``user_id`` is the identity verified from the connection's token, or
    None for anonymous viewers who may only follow content rooms.
    """

    websocket: Any
    user_id: str | None = None
    limiter: ConnectionRateLimiter = field(default_factory=ConnectionRateLimiter)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    connected_at: datetime = field(default_factory=utcnow)
    rooms: set[str] = field(default_factory=set)

    async def send(self, message: RealtimeMessage) -> None:
        await self.websocket.send_text(message.to_json())


class RoomRegistry:
    """Maps room names to the connections subscribed to them.

    Only ever touched from the event loop thread, so no locking.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, set[Connection]] = {}

    def join(self, connection: Connection, room: str) -> None:
        self._rooms.setdefault(room, set()).add(connection)
        connection.rooms.add(room)

    def leave(self, connection: Connection, room: str) -> bool:
        """Unsubscribe; returns False when the connection was not a member."""
        members = self._rooms.get(room)
        if members is None or connection not in members:
            return False
        members.discard(connection)
        if not members:
            del self._rooms[room]
        connection.rooms.discard(room)
        return True

    def release(self, connection: Connection) -> list[str]:
        """Drop every membership held by ``connection`` and return the room names."""
        released = sorted(connection.rooms)
        for room in released:
            self.leave(connection, room)
        connection.rooms.clear()
        return released

    def members(self, room: str) -> list[Connection]:
        return list(self._rooms.get(room, ()))

    def rooms(self) -> dict[str, int]:
        """Room name to subscriber count, for status reporting."""
        return {room: len(members) for room, members in self._rooms.items()}
