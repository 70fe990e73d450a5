# tests/realtime/test_gateway.py
"""Tests for socket room membership, throttling and delivery."""

import json
import logging

import pytest

from codegram.realtime import RealtimeGateway, RealtimeMessage
from tests.helpers import RecordingSocket


@pytest.mark.asyncio
async def test_connect_accepts_and_registers(gateway: RealtimeGateway) -> None:
    socket = RecordingSocket()
    conn = await gateway.connect(socket, "user-1")

    assert socket.accepted
    assert conn.user_id == "user-1"
    assert conn.limiter.running
    assert gateway.connection_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["", "x" * 51, 12345, None, ["user-1"]])
async def test_join_user_room_rejects_invalid_ids(
    gateway: RealtimeGateway, caplog: pytest.LogCaptureFixture, value
) -> None:
    conn = await gateway.connect(RecordingSocket(), "user-1")

    with caplog.at_level(logging.WARNING, logger="codegram.realtime.gateway"):
        assert gateway.join_user_room(conn, value) is False

    assert conn.rooms == set()
    assert "Invalid userId" in caplog.text


@pytest.mark.asyncio
async def test_join_user_room_accepts_fifty_characters(gateway: RealtimeGateway) -> None:
    user_id = "u" * 50
    conn = await gateway.connect(RecordingSocket(), user_id)
    assert gateway.join_user_room(conn, user_id) is True
    assert conn.rooms == {f"user:{user_id}"}


@pytest.mark.asyncio
async def test_join_user_room_is_bound_to_identity(
    gateway: RealtimeGateway, caplog: pytest.LogCaptureFixture
) -> None:
    conn = await gateway.connect(RecordingSocket(), "alice")
    anonymous = await gateway.connect(RecordingSocket())

    with caplog.at_level(logging.WARNING, logger="codegram.realtime.gateway"):
        assert gateway.join_user_room(conn, "bob") is False
        assert gateway.join_user_room(anonymous, "bob") is False

    assert gateway.registry.members("user:bob") == []
    assert "foreign identity" in caplog.text


@pytest.mark.asyncio
async def test_anonymous_connection_may_follow_content(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket())
    assert gateway.join_content_room(conn, "snippet-1")
    assert gateway.leave_content_room(conn, "snippet-1")
    assert conn.rooms == set()


@pytest.mark.asyncio
async def test_eleventh_content_join_is_dropped(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket())

    for index in range(11):
        await gateway.handle_client_message(
            conn, json.dumps({"event": "join-content-room", "data": f"content-{index}"})
        )

    assert len(conn.rooms) == 10
    assert "content:content-10" not in conn.rooms

    conn.limiter.reset()
    await gateway.handle_client_message(
        conn, json.dumps({"event": "join-content-room", "data": "content-10"})
    )
    assert "content:content-10" in conn.rooms


@pytest.mark.asyncio
async def test_malformed_and_unknown_frames_are_ignored(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket(), "alice")

    await gateway.handle_client_message(conn, "not json")
    await gateway.handle_client_message(conn, json.dumps(["join-user-room"]))
    await gateway.handle_client_message(conn, json.dumps({"event": "shout", "data": "x"}))

    assert conn.rooms == set()
    assert conn.limiter.count("shout") == 0


@pytest.mark.asyncio
async def test_deeply_nested_frame_is_dropped(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket(), "alice")

    await gateway.handle_client_message(conn, "[" * 200_000)
    await gateway.handle_client_message(
        conn, json.dumps({"event": "join-user-room", "data": "alice"})
    )

    assert conn.rooms == {"user:alice"}


@pytest.mark.asyncio
async def test_handle_client_message_joins_own_room(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket(), "alice")
    await gateway.handle_client_message(
        conn, json.dumps({"event": "join-user-room", "data": "alice"})
    )
    assert conn.rooms == {"user:alice"}


@pytest.mark.asyncio
async def test_emit_reaches_only_room_members(gateway: RealtimeGateway) -> None:
    inside, outside = RecordingSocket(), RecordingSocket()
    member = await gateway.connect(inside)
    await gateway.connect(outside)
    gateway.join_content_room(member, "doc-1")

    await gateway.emit_to_content("doc-1", "new_comment", {"id": "c1"})

    assert inside.sent == [{"event": "new_comment", "data": {"id": "c1"}}]
    assert outside.sent == []


@pytest.mark.asyncio
async def test_failing_socket_does_not_block_other_members(gateway: RealtimeGateway) -> None:
    broken, healthy = RecordingSocket(fail=True), RecordingSocket()
    for socket in (broken, healthy):
        conn = await gateway.connect(socket)
        gateway.join_content_room(conn, "doc-1")

    delivered = await gateway.deliver("content:doc-1", RealtimeMessage("comment_deleted", {}))

    assert delivered == 1
    assert len(healthy.sent) == 1


@pytest.mark.asyncio
async def test_disconnect_releases_rooms_and_limiter(gateway: RealtimeGateway) -> None:
    conn = await gateway.connect(RecordingSocket(), "alice")
    gateway.join_user_room(conn, "alice")
    gateway.join_content_room(conn, "snippet-1")

    gateway.on_disconnect(conn, reason="client closed")

    assert gateway.registry.rooms() == {}
    assert gateway.connection_count == 0
    assert not conn.limiter.running
