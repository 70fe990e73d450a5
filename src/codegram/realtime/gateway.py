"""Realtime gateway: connection lifecycle, room membership and emission.

One gateway is created per process at startup and handed to every
component that broadcasts. Emission always goes through the message bus;
delivery to sockets happens in :meth:`RealtimeGateway.deliver`, which the
bus calls for every message it receives.
"""

from __future__ import annotations

import logging
from typing import Any

from codegram.core.settings import settings

from .bus import InMemoryBus, MessageBus
from .events import ClientEvent, RealtimeMessage, content_room, user_room
from .rate_limit import ConnectionRateLimiter
from .registry import Connection, RoomRegistry

logger = logging.getLogger(__name__)


class RealtimeGateway:
    """Owns the room registry, the per-connection limiters and the bus."""

    def __init__(
        self,
        bus: MessageBus | None = None,
        *,
        rate_window_seconds: float | None = None,
        rate_limits: dict[str, int] | None = None,
        max_id_length: int | None = None,
    ) -> None:
        self.bus = bus or InMemoryBus()
        self.registry = RoomRegistry()
        self.rate_window_seconds = (
            settings.realtime_rate_window_seconds
            if rate_window_seconds is None
            else rate_window_seconds
        )
        self.rate_limits = dict(settings.realtime_rate_limits if rate_limits is None else rate_limits)
        self.max_id_length = settings.realtime_max_id_length if max_id_length is None else max_id_length
        self._connections: dict[str, Connection] = {}

    async def start(self) -> None:
        await self.bus.start(self.deliver)

    async def stop(self) -> None:
        for connection in list(self._connections.values()):
            self.on_disconnect(connection, reason="shutdown")
        await self.bus.stop()

    # --- Connection lifecycle -------------------------------------------------------
    async def connect(self, websocket: Any, user_id: str | None = None) -> Connection:
        """Accept ``websocket`` and register it with a fresh rate limiter."""
        await websocket.accept()
        connection = Connection(
            websocket=websocket,
            user_id=user_id,
            limiter=ConnectionRateLimiter(self.rate_window_seconds),
        )
        connection.limiter.start()
        self._connections[connection.id] = connection
        logger.info(
            "Socket connection established: id=%s user=%s",
            connection.id,
            user_id or "anonymous",
        )
        return connection

    def on_disconnect(self, connection: Connection, reason: str | None = None) -> None:
        """Release all rooms and counters. Terminal for the connection."""
        released = self.registry.release(connection)
        connection.limiter.stop()
        self._connections.pop(connection.id, None)
        logger.info(
            "Socket disconnected: id=%s reason=%s rooms_released=%d",
            connection.id,
            reason,
            len(released),
        )

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # --- Rate limiting --------------------------------------------------------------
    def check_rate_limit(self, connection: Connection, event_name: str, limit: int) -> bool:
        """Count one ``event_name`` for ``connection``; False means drop it silently."""
        if connection.limiter.allow(event_name, limit):
            return True
        logger.warning(
            "Socket rate limit exceeded: id=%s event=%s count=%d",
            connection.id,
            event_name,
            connection.limiter.count(event_name),
        )
        return False

    # --- Room membership ------------------------------------------------------------
    def _valid_room_id(self, value: Any) -> bool:
        return isinstance(value, str) and 0 < len(value) <= self.max_id_length

    def join_user_room(self, connection: Connection, user_id: Any) -> bool:
        """Subscribe to ``user:<user_id>``.

        The requested id must match the identity the connection authenticated
        with; anonymous connections cannot join any user room.
        """
        if not self._valid_room_id(user_id):
            logger.warning("Invalid userId in join-user-room: id=%s value=%r", connection.id, user_id)
            return False
        if connection.user_id != user_id:
            logger.warning(
                "Rejected join-user-room for foreign identity: id=%s user=%s requested=%s",
                connection.id,
                connection.user_id,
                user_id,
            )
            return False
        self.registry.join(connection, user_room(user_id))
        logger.debug("Socket joined user room: id=%s user=%s", connection.id, user_id)
        return True

    def join_content_room(self, connection: Connection, content_id: Any) -> bool:
        if not self._valid_room_id(content_id):
            logger.warning(
                "Invalid contentId in join-content-room: id=%s value=%r", connection.id, content_id
            )
            return False
        self.registry.join(connection, content_room(content_id))
        logger.debug("Socket joined content room: id=%s content=%s", connection.id, content_id)
        return True

    def leave_content_room(self, connection: Connection, content_id: Any) -> bool:
        if not self._valid_room_id(content_id):
            logger.warning(
                "Invalid contentId in leave-content-room: id=%s value=%r", connection.id, content_id
            )
            return False
        left = self.registry.leave(connection, content_room(content_id))
        logger.debug("Socket left content room: id=%s content=%s", connection.id, content_id)
        return left

    async def handle_client_message(self, connection: Connection, raw: str) -> None:
        """Dispatch one client frame. Invalid or throttled frames are dropped."""
        try:
            message = RealtimeMessage.from_json(raw)
        except ValueError:
            logger.warning("Malformed socket frame from %s: %.100s", connection.id, raw)
            return

        try:
            event = ClientEvent(message.event)
        except ValueError:
            logger.debug("Ignoring unknown socket event %s from %s", message.event, connection.id)
            return

        limit = self.rate_limits.get(event.value, self.rate_limits.get("default", 10))
        if not self.check_rate_limit(connection, event.value, limit):
            return

        if event is ClientEvent.JOIN_USER_ROOM:
            self.join_user_room(connection, message.data)
        elif event is ClientEvent.JOIN_CONTENT_ROOM:
            self.join_content_room(connection, message.data)
        elif event is ClientEvent.LEAVE_CONTENT_ROOM:
            self.leave_content_room(connection, message.data)

    # --- Emission -------------------------------------------------------------------
    async def emit(self, room: str, event: str, payload: Any) -> None:
        """Publish ``event`` to ``room``. Bus errors propagate to the caller."""
        await self.bus.publish(room, RealtimeMessage(event=event, data=payload))

    async def emit_to_user(self, user_id: str, event: str, payload: Any) -> None:
        await self.emit(user_room(user_id), event, payload)

    async def emit_to_content(self, content_id: str, event: str, payload: Any) -> None:
        await self.emit(content_room(content_id), event, payload)

    async def deliver(self, room: str, message: RealtimeMessage) -> int:
        """Send ``message`` to every local subscriber of ``room``.

        Returns the number of sockets written. A failing socket is logged and
        skipped; the remaining subscribers still receive the message.
        """
        delivered = 0
        for connection in self.registry.members(room):
            try:
                await connection.send(message)
            except Exception as exc:
                logger.warning(
                    "Failed to deliver %s to %s in %s: %s", message.event, connection.id, room, exc
                )
                continue
            delivered += 1
        return delivered
