# tests/realtime/test_fanout.py
"""Tests for follower fan-out."""

import pytest
from sqlalchemy.orm import Session

from codegram.models import Follow, User
from codegram.realtime import RealtimeGateway
from codegram.realtime.fanout import FanoutBroadcaster
from tests.helpers import RecordingBus


def _follow(db_session: Session, follower: User, followee: User) -> None:
    db_session.add(Follow(follower_id=follower.id, following_id=followee.id))
    db_session.flush()


@pytest.mark.asyncio
async def test_emits_to_each_follower_and_author(
    db_session: Session, gateway: RealtimeGateway, bus: RecordingBus, alice, bob, carol
) -> None:
    _follow(db_session, alice, bob)
    _follow(db_session, carol, bob)

    published = await FanoutBroadcaster(gateway).emit_to_followers(
        db_session, bob.id, "new-snippet", {"id": "s1"}
    )

    assert published == 3
    assert sorted(bus.rooms_for("new-snippet")) == sorted(
        [f"user:{alice.id}", f"user:{carol.id}", f"user:{bob.id}"]
    )


@pytest.mark.asyncio
async def test_author_without_followers_still_gets_own_push(
    db_session: Session, gateway: RealtimeGateway, bus: RecordingBus, bob
) -> None:
    published = await FanoutBroadcaster(gateway).emit_to_followers(
        db_session, bob.id, "new-doc", {"id": "d1"}
    )

    assert published == 1
    assert bus.rooms_for("new-doc") == [f"user:{bob.id}"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("author_id", "event_name", "payload"),
    [(None, "new-bug", {}), ("bob", None, {}), ("bob", "new-bug", None)],
)
async def test_missing_arguments_are_ignored(
    db_session: Session, gateway: RealtimeGateway, bus: RecordingBus, author_id, event_name, payload
) -> None:
    published = await FanoutBroadcaster(gateway).emit_to_followers(
        db_session, author_id, event_name, payload
    )
    assert published == 0
    assert bus.published == []


@pytest.mark.asyncio
async def test_bus_failures_are_swallowed(
    db_session: Session, gateway: RealtimeGateway, mocker, alice, bob
) -> None:
    _follow(db_session, alice, bob)
    mocker.patch.object(gateway.bus, "publish", side_effect=ConnectionError("redis down"))

    published = await FanoutBroadcaster(gateway).emit_to_followers(
        db_session, bob.id, "new-snippet", {"id": "s1"}
    )

    assert published == 0


@pytest.mark.asyncio
async def test_query_failure_is_swallowed(gateway: RealtimeGateway, mocker) -> None:
    db = mocker.MagicMock()
    db.scalars.side_effect = RuntimeError("database gone")

    published = await FanoutBroadcaster(gateway).emit_to_followers(
        db, "bob", "new-snippet", {"id": "s1"}
    )

    assert published == 0
