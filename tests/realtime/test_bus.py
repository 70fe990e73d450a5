# tests/realtime/test_bus.py
"""Tests for the wire envelope and the message bus implementations."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from codegram.core.settings import Settings
from codegram.realtime import InMemoryBus, RealtimeMessage, RedisBus, build_message_bus


def test_message_round_trips_through_json() -> None:
    message = RealtimeMessage.from_json('{"event": "join-content-room", "data": "abc"}')
    assert message == RealtimeMessage(event="join-content-room", data="abc")
    assert json.loads(message.to_json()) == {"event": "join-content-room", "data": "abc"}


@pytest.mark.parametrize("raw", ["[]", '{"data": 1}', '{"event": 5}', "{"])
def test_message_rejects_bad_frames(raw: str) -> None:
    with pytest.raises(ValueError):
        RealtimeMessage.from_json(raw)


@pytest.mark.asyncio
async def test_in_memory_bus_drops_until_started() -> None:
    handler = AsyncMock()
    bus = InMemoryBus()

    await bus.publish("user:a", RealtimeMessage("new_notification", {}))
    handler.assert_not_called()

    await bus.start(handler)
    await bus.publish("user:a", RealtimeMessage("new_notification", {"id": 1}))
    handler.assert_awaited_once_with("user:a", RealtimeMessage("new_notification", {"id": 1}))


@pytest.mark.asyncio
async def test_redis_bus_publishes_room_envelope() -> None:
    client = MagicMock()
    client.publish = AsyncMock()
    bus = RedisBus("redis://unused", "codegram:test", client=client)

    await bus.publish("content:s1", RealtimeMessage("new_comment", {"id": "c1"}))

    channel, payload = client.publish.await_args.args
    assert channel == "codegram:test"
    assert json.loads(payload) == {"room": "content:s1", "event": "new_comment", "data": {"id": "c1"}}


@pytest.mark.asyncio
async def test_redis_bus_listener_hands_messages_to_handler() -> None:
    frames = [
        {"type": "message", "data": json.dumps({"room": "user:a", "event": "new-follower", "data": {}})},
        {"type": "message", "data": "garbage"},
        {"type": "subscribe", "data": 1},
    ]

    async def listen():
        for frame in frames:
            yield frame

    pubsub = MagicMock()
    pubsub.listen = listen
    handler = AsyncMock()
    bus = RedisBus("redis://unused", "codegram:test", client=MagicMock())
    bus._pubsub = pubsub
    bus._handler = handler

    await bus._listen()

    handler.assert_awaited_once_with("user:a", RealtimeMessage("new-follower", {}))


def test_build_message_bus_selects_backend() -> None:
    assert isinstance(build_message_bus(Settings(REALTIME_BACKEND="memory")), InMemoryBus)
    assert isinstance(
        build_message_bus(Settings(REALTIME_BACKEND="redis", REDIS_URL="redis://localhost:6390")),
        RedisBus,
    )


@pytest.mark.asyncio
async def test_redis_bus_listener_resubscribes_after_connection_loss(caplog) -> None:
    async def broken_listen():
        raise ConnectionError("redis went away")
        yield  # pragma: no cover

    async def healthy_listen():
        yield {"type": "message", "data": json.dumps({"room": "user:a", "event": "new-doc", "data": 1})}

    broken = MagicMock()
    broken.listen = broken_listen
    broken.aclose = AsyncMock()
    healthy = MagicMock()
    healthy.listen = healthy_listen
    healthy.subscribe = AsyncMock()
    client = MagicMock()
    client.pubsub.return_value = healthy
    handler = AsyncMock()

    bus = RedisBus("redis://unused", "codegram:test", client=client, retry_delay=0)
    bus._pubsub = broken
    bus._handler = handler

    with caplog.at_level("ERROR", logger="codegram.realtime.bus"):
        await bus._listen()

    broken.aclose.assert_awaited_once()
    client.pubsub.assert_called_once_with(ignore_subscribe_messages=True)
    healthy.subscribe.assert_awaited_once_with("codegram:test")
    handler.assert_awaited_once_with("user:a", RealtimeMessage("new-doc", 1))
    assert "redis went away" in caplog.text
