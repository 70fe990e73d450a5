"""Realtime push layer: rooms, rate limits, bus and follower fan-out."""

from .bus import InMemoryBus, MessageBus, RedisBus, build_message_bus
from .events import ClientEvent, RealtimeMessage, ServerEvent, content_room, user_room
from .fanout import FanoutBroadcaster
from .gateway import RealtimeGateway
from .rate_limit import ConnectionRateLimiter
from .registry import Connection, RoomRegistry

__all__ = [
    "InMemoryBus", "MessageBus", "RedisBus", "build_message_bus",
    "ClientEvent", "RealtimeMessage", "ServerEvent", "content_room", "user_room",
    "FanoutBroadcaster",
    "RealtimeGateway",
    "ConnectionRateLimiter",
    "Connection", "RoomRegistry",
]
