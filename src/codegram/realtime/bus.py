"""Publish/subscribe transport between event producers and socket holders.

Producers publish ``(room, message)`` pairs; every process subscribed to
the bus hands them to its own room registry. With :class:`InMemoryBus` only
the publishing process delivers, which assumes a single instance or sticky
routing. :class:`RedisBus` fans messages out to every instance through a
Redis channel so a notification produced on one process reaches a socket
held by another.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from codegram.core.settings import Settings

from .events import RealtimeMessage

logger = logging.getLogger(__name__)

DeliveryHandler = Callable[[str, RealtimeMessage], Awaitable[None]]


class MessageBus(ABC):
    """Room-keyed publish/subscribe channel."""

    @abstractmethod
    async def start(self, handler: DeliveryHandler) -> None:
        """Begin delivering published messages to ``handler``."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop delivery and release resources."""

    @abstractmethod
    async def publish(self, room: str, message: RealtimeMessage) -> None:
        """Publish ``message`` to ``room``."""


class InMemoryBus(MessageBus):
    """Delivers straight to the local registry of this process."""

    def __init__(self) -> None:
        self._handler: DeliveryHandler | None = None

    async def start(self, handler: DeliveryHandler) -> None:
        self._handler = handler

    async def stop(self) -> None:
        self._handler = None

    async def publish(self, room: str, message: RealtimeMessage) -> None:
        if self._handler is None:
            logger.debug("Bus not started, dropping %s for %s", message.event, room)
            return
        await self._handler(room, message)


class RedisBus(MessageBus):
    """Shares one Redis pub/sub channel across every application instance.

    If the subscription breaks (a Redis restart, a dropped connection) the
    listener logs the failure, waits ``retry_delay`` seconds and subscribes
    again on a fresh pub/sub connection.
    """

    def __init__(
        self,
        url: str,
        channel: str,
        client: aioredis.Redis | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        self.channel = channel
        self.retry_delay = retry_delay
        self._redis = client or aioredis.from_url(url)
        self._pubsub: Any = None
        self._handler: DeliveryHandler | None = None
        self._task: asyncio.Task[None] | None = None

    async def start(self, handler: DeliveryHandler) -> None:
        self._handler = handler
        await self._subscribe()
        self._task = asyncio.create_task(self._listen())
        logger.info("Realtime bus subscribed to Redis channel %s", self.channel)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
            self._pubsub = None
        await self._redis.aclose()
        self._handler = None

    async def publish(self, room: str, message: RealtimeMessage) -> None:
        envelope = json.dumps({"room": room, **message.to_dict()})
        await self._redis.publish(self.channel, envelope)

    async def _subscribe(self) -> None:
        self._pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        await self._pubsub.subscribe(self.channel)

    async def _discard_pubsub(self) -> None:
        pubsub, self._pubsub = self._pubsub, None
        if pubsub is None:
            return
        try:
            await pubsub.aclose()
        except (RedisError, OSError) as exc:
            logger.debug("Ignoring error closing broken pub/sub: %s", exc)

    async def _listen(self) -> None:
        """Consume the channel until cancelled, re-subscribing after failures."""
        while True:
            try:
                if self._pubsub is None:
                    await self._subscribe()
                    logger.info("Realtime bus re-subscribed to Redis channel %s", self.channel)
                await self._consume(self._pubsub)
                return
            except (RedisError, OSError) as exc:
                logger.error(
                    "Redis bus listener failed on %s, retrying in %.1fs: %s",
                    self.channel,
                    self.retry_delay,
                    exc,
                )
                await self._discard_pubsub()
                await asyncio.sleep(self.retry_delay)

    async def _consume(self, pubsub: Any) -> None:
        async for raw in pubsub.listen():
            if raw.get("type") != "message":
                continue
            try:
                envelope = json.loads(raw["data"])
                room = envelope["room"]
                message = RealtimeMessage(event=envelope["event"], data=envelope.get("data"))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Discarding malformed bus message: %s", exc)
                continue
            if self._handler is None:
                continue
            try:
                await self._handler(room, message)
            except Exception:
                logger.exception("Delivery failed for %s in %s", message.event, room)


def build_message_bus(config: Settings) -> MessageBus:
    """Return the bus selected by ``REALTIME_BACKEND``."""
    if config.realtime_backend == "redis":
        return RedisBus(config.redis_url, config.realtime_channel)
    return InMemoryBus()
