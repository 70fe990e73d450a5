"""Periodic cleanup of expired bug reports.

Only the instance started with ``PRIMARY_INSTANCE=true`` runs the sweep so
that horizontally scaled deployments do not race each other over the same
rows.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codegram.core.settings import settings
from codegram.db.session import SessionLocal
from codegram.db.time import utcnow
from codegram.models import Bug

from .targets import purge_content

logger = logging.getLogger(__name__)


class ExpiredBugSweeper:
    """Deletes bug reports past ``expires_at`` every ``BUG_SWEEP_INTERVAL_SECONDS``."""

    def __init__(self, db_session: Session | None = None, interval: float | None = None) -> None:
        self._db_session = db_session
        self.interval = settings.bug_sweep_interval_seconds if interval is None else interval
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    def sweep_once(self, db: Session) -> int:
        """Delete every expired bug with its interactions. Returns the count removed."""
        expired = db.scalars(select(Bug.id).where(Bug.expires_at <= utcnow())).all()
        if not expired:
            return 0
        removed = purge_content(db, "bug", list(expired))
        db.commit()
        logger.info("Deleted %d expired bug reports", removed)
        return removed

    async def start(self) -> None:
        """Start the sweep loop unless this is not the primary instance."""
        if not settings.primary_instance:
            logger.info("Not the primary instance, expired bug sweep disabled")
            return
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None

    def _sweep(self) -> int:
        if self._db_session is not None:
            return self.sweep_once(self._db_session)
        with SessionLocal() as db:
            return self.sweep_once(db)

    async def _run(self) -> None:
        interval = max(0.1, float(self.interval))
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self._sweep)
            except SQLAlchemyError as e:
                logger.error("Expired bug sweep failed: %s", e, exc_info=True)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
