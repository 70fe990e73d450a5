# tests/services/test_maintenance.py
"""Tests for the expired bug sweeper."""

import asyncio

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from codegram.core.settings import settings
from codegram.models import Bug, Like
from codegram.services import ExpiredBugSweeper


def test_sweep_once_removes_only_expired_bugs(
    db_session: Session, alice, bug, expired_bug
) -> None:
    db_session.add(Like(user_id=alice.id, bug_id=expired_bug.id))
    db_session.flush()

    removed = ExpiredBugSweeper(db_session=db_session).sweep_once(db_session)

    assert removed == 1
    assert [b.id for b in db_session.scalars(select(Bug))] == [bug.id]
    assert db_session.scalars(select(Like)).all() == []


@pytest.mark.asyncio
async def test_sweeper_is_disabled_off_primary(mocker) -> None:
    mocker.patch.object(settings, "primary_instance", False)
    sweeper = ExpiredBugSweeper()

    await sweeper.start()

    assert sweeper._task is None
    await sweeper.stop()


@pytest.mark.asyncio
async def test_sweeper_runs_on_primary(db_session: Session, mocker, expired_bug) -> None:
    mocker.patch.object(settings, "primary_instance", True)
    sweeper = ExpiredBugSweeper(db_session=db_session, interval=0.05)

    await sweeper.start()
    assert sweeper._task is not None
    await asyncio.sleep(0.2)
    await sweeper.stop()

    assert sweeper._task is None
    db_session.expire_all()
    assert db_session.scalars(select(Bug)).all() == []
