"""Per-connection event throttling."""

from __future__ import annotations

import asyncio
import contextlib
import logging

logger = logging.getLogger(__name__)


class ConnectionRateLimiter:
    """Counts events per name and clears every counter once per window.

    The counters belong to a single connection and are thrown away with it,
    so no shared store is involved. The reset runs on a recurring asyncio
    task started by :meth:`start` and cancelled by :meth:`stop`.
    """

    def __init__(self, window_seconds: float = 60.0) -> None:
        self.window_seconds = window_seconds
        self._counts: dict[str, int] = {}
        self._task: asyncio.Task[None] | None = None

    def allow(self, event_name: str, limit: int) -> bool:
        """Record one event and return False once ``limit`` is already reached."""
        count = self._counts.get(event_name, 0)
        if count >= limit:
            return False
        self._counts[event_name] = count + 1
        return True

    def count(self, event_name: str) -> int:
        return self._counts.get(event_name, 0)

    def reset(self) -> None:
        self._counts.clear()

    def start(self) -> None:
        """Begin the periodic reset on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._reset_loop())

    def stop(self) -> None:
        """Cancel the reset timer and drop all counters."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._counts.clear()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _reset_loop(self) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            while True:
                await asyncio.sleep(self.window_seconds)
                self._counts.clear()
