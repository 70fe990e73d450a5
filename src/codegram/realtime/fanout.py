"""Push newly published content to the author's followers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from codegram.models import Follow

from .events import user_room
from .gateway import RealtimeGateway

logger = logging.getLogger(__name__)


class FanoutBroadcaster:
    """Best-effort follower fan-out.

    The content row is already committed when this runs. A missed push is
    recovered by the next feed fetch, so nothing here is allowed to raise.
    """

    def __init__(self, gateway: RealtimeGateway) -> None:
        self.gateway = gateway

    async def emit_to_followers(
        self,
        db: Session,
        author_id: str | None,
        event_name: str | None,
        payload: Any,
    ) -> int:
        """Emit to ``user:<follower>`` for every follower plus ``user:<author_id>``.

        Returns:
            Number of rooms the event was published to (0 when nothing was sent).
        """
        if not author_id or not event_name or payload is None:
            logger.warning(
                "Invalid parameters for emit_to_followers: author=%r event=%r",
                author_id,
                event_name,
            )
            return 0

        try:
            follower_ids = db.scalars(
                select(Follow.follower_id).where(Follow.following_id == author_id)
            ).all()
            rooms = [user_room(follower_id) for follower_id in follower_ids]
            rooms.append(user_room(author_id))

            results = await asyncio.gather(
                *(self.gateway.emit(room, event_name, payload) for room in rooms),
                return_exceptions=True,
            )
        except Exception:
            logger.exception(
                "Error emitting event to followers: author=%s event=%s", author_id, event_name
            )
            return 0

        published = 0
        for room, result in zip(rooms, results, strict=True):
            if isinstance(result, BaseException):
                logger.error("Fan-out to %s failed for %s: %s", room, event_name, result)
            else:
                published += 1

        logger.debug(
            "Event emitted to followers: author=%s event=%s followers=%d",
            author_id,
            event_name,
            len(follower_ids),
        )
        return published
