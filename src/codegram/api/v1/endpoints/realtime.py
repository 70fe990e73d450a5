# src/codegram/api/v1/endpoints/realtime.py
"""WebSocket entry point for live notifications and comment rooms."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from codegram.core.security import decode_subject
from codegram.models import User

from ..dependencies import GatewayDep, SessionFactoryDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _socket_identity(token: str, session_factory: SessionFactoryDep) -> str | None:
    """Return the user id behind ``token`` if it names an active account."""
    user_id = decode_subject(token)
    if user_id is None:
        logger.warning("Rejected socket with invalid token")
        return None
    with session_factory() as db:
        user = db.get(User, user_id)
        if user is None:
            logger.warning("Rejected socket for unknown user %s", user_id)
            return None
        if user.is_blocked:
            logger.warning("Rejected socket for blocked user %s", user_id)
            return None
    return user_id


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    gateway: GatewayDep,
    session_factory: SessionFactoryDep,
    token: Annotated[str | None, Query()] = None,
) -> None:
    """Hold one client connection.

    Frames are ``{"event": ..., "data": ...}`` JSON text frames; binary
    frames are ignored. Without a token the client is anonymous and may only
    join content rooms. A token that fails verification, or that belongs to
    an unknown or blocked account, closes the socket before it is accepted.
    """
    user_id = None
    if token:
        user_id = _socket_identity(token, session_factory)
        if user_id is None:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    connection = await gateway.connect(websocket, user_id)
    reason = "server error"
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                reason = f"client closed ({frame.get('code', status.WS_1000_NORMAL_CLOSURE)})"
                break
            text = frame.get("text")
            if text is None:
                logger.debug("Ignoring binary socket frame from %s", connection.id)
                continue
            await gateway.handle_client_message(connection, text)
    except WebSocketDisconnect as exc:
        reason = f"client closed ({exc.code})"
    finally:
        gateway.on_disconnect(connection, reason)


@router.get("/ws/status")
async def realtime_status(gateway: GatewayDep) -> dict[str, object]:
    """Process-local connection and room counts."""
    return {
        "connections": gateway.connection_count,
        "rooms": gateway.registry.rooms(),
    }
