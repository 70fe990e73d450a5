"""Realtime event names and the wire envelope."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ClientEvent(str, Enum):
    """Events a connected client may send."""

    JOIN_USER_ROOM = "join-user-room"
    JOIN_CONTENT_ROOM = "join-content-room"
    LEAVE_CONTENT_ROOM = "leave-content-room"


class ServerEvent(str, Enum):
    """Events pushed from the server to subscribed rooms."""

    NEW_NOTIFICATION = "new_notification"
    NEW_FOLLOWER = "new-follower"

    NEW_SNIPPET = "new-snippet"
    NEW_DOC = "new-doc"
    NEW_BUG = "new-bug"

    NEW_COMMENT = "new_comment"
    COMMENT_UPDATED = "comment_updated"
    COMMENT_DELETED = "comment_deleted"


@dataclass(frozen=True)
class RealtimeMessage:
    """A single ``{"event": ..., "data": ...}`` frame.

    ``data`` must already be JSON-compatible; callers dump pydantic models
    with ``mode="json"`` before emitting.
    """

    event: str
    data: Any

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.event, "data": self.data}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str | bytes) -> RealtimeMessage:
        """Parse a client frame.

        Raises:
            ValueError: If the frame is not a JSON object with a string ``event``
                or nests deeper than the decoder allows.
        """
        try:
            decoded = json.loads(raw)
        except RecursionError as exc:
            raise ValueError("Frame is nested too deeply") from exc
        if not isinstance(decoded, dict) or not isinstance(decoded.get("event"), str):
            raise ValueError("Frame must be an object with an 'event' string")
        return cls(event=decoded["event"], data=decoded.get("data"))


def user_room(user_id: str) -> str:
    """Name of a user's private notification room."""
    return f"user:{user_id}"


def content_room(content_id: str) -> str:
    """Name of the shared comment room for one piece of content."""
    return f"content:{content_id}"
