# tests/helpers.py
"""Test doubles and factories shared by the service, realtime and API tests."""

from __future__ import annotations

import json
from itertools import count
from typing import Any

from sqlalchemy.orm import Session

from codegram.core.security import create_access_token
from codegram.models import User, UserRole
from codegram.realtime import InMemoryBus, RealtimeMessage

_USERNAME_COUNTER = count(1)


class RecordingSocket:
    """Stand-in for a Starlette WebSocket that keeps every frame it is sent."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.accepted = False
        self.sent: list[dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(json.loads(text))

    def events(self, name: str | None = None) -> list[dict[str, Any]]:
        return [frame for frame in self.sent if name is None or frame["event"] == name]


class RecordingBus(InMemoryBus):
    """In-process bus that also remembers every publish."""

    def __init__(self) -> None:
        super().__init__()
        self.published: list[tuple[str, RealtimeMessage]] = []

    async def publish(self, room: str, message: RealtimeMessage) -> None:
        self.published.append((room, message))
        await super().publish(room, message)

    def rooms_for(self, event: str) -> list[str]:
        return [room for room, message in self.published if message.event == event]


def make_user(db_session: Session, name: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        username=f"{name.lower()}-{next(_USERNAME_COUNTER)}",
        name=name,
        avatar=f"https://avatars.example.com/{name.lower()}.png",
        role=role,
    )
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
