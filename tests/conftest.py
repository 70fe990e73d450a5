# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from contextlib import nullcontext
from datetime import timedelta
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PRIMARY_INSTANCE", "false")

from codegram.db.session import Base
from codegram.db.session import get_db as app_get_session
from codegram.db.session import get_session_factory
from codegram.db.time import utcnow
from codegram.main import app as fastapi_app
from codegram.models import Bug, Doc, Snippet, User, UserRole
from codegram.realtime import RealtimeGateway
from codegram.realtime.fanout import FanoutBroadcaster
from codegram.services import (
    CommentService,
    ContentService,
    InteractionService,
    NotificationService,
)
from tests.helpers import RecordingBus, auth_headers, make_user

TEST_DB_URL = "sqlite://"

@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    def _get_session_factory_override():
        # WebSocket handlers scope sessions with `with factory() as db`.
        return lambda: nullcontext(db_session)

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_session_factory] = _get_session_factory_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


# --- Realtime fixtures ------------------------------------------------------------


@pytest.fixture()
def bus() -> RecordingBus:
    return RecordingBus()


@pytest_asyncio.fixture()
async def gateway(bus: RecordingBus) -> Any:
    gateway = RealtimeGateway(
        bus,
        rate_window_seconds=60.0,
        rate_limits={"join-user-room": 5, "join-content-room": 10, "leave-content-room": 10},
        max_id_length=50,
    )
    await gateway.start()
    try:
        yield gateway
    finally:
        await gateway.stop()


@pytest.fixture()
def notification_service(gateway: RealtimeGateway) -> NotificationService:
    return NotificationService(gateway)


@pytest.fixture()
def interaction_service(
    gateway: RealtimeGateway, notification_service: NotificationService
) -> InteractionService:
    return InteractionService(gateway, notification_service)


@pytest.fixture()
def comment_service(
    gateway: RealtimeGateway, notification_service: NotificationService
) -> CommentService:
    return CommentService(gateway, notification_service)


@pytest.fixture()
def content_service(
    gateway: RealtimeGateway, notification_service: NotificationService
) -> ContentService:
    return ContentService(FanoutBroadcaster(gateway), notification_service)


# --- Data fixtures ------------------------------------------------------------------


@pytest.fixture()
def alice(db_session: Session) -> User:
    return make_user(db_session, "Alice")


@pytest.fixture()
def bob(db_session: Session) -> User:
    return make_user(db_session, "Bob")


@pytest.fixture()
def carol(db_session: Session) -> User:
    return make_user(db_session, "Carol")


@pytest.fixture()
def admin(db_session: Session) -> User:
    return make_user(db_session, "Admin", role=UserRole.ADMIN)


@pytest.fixture()
def alice_headers(alice: User) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture()
def bob_headers(bob: User) -> dict[str, str]:
    return auth_headers(bob)


@pytest.fixture()
def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture()
def snippet(db_session: Session, bob: User) -> Snippet:
    """A public snippet authored by Bob."""
    snippet = Snippet(
        author_id=bob.id,
        title="Binary search",
        content="def bisect(xs, x): ...",
        language="python",
        tags=["algorithms"],
    )
    db_session.add(snippet)
    db_session.flush()
    db_session.refresh(snippet)
    return snippet


@pytest.fixture()
def private_doc(db_session: Session, bob: User) -> Doc:
    doc = Doc(author_id=bob.id, title="Drafts", content="# Notes", is_public=False)
    db_session.add(doc)
    db_session.flush()
    db_session.refresh(doc)
    return doc


@pytest.fixture()
def bug(db_session: Session, bob: User) -> Bug:
    bug = Bug(
        author_id=bob.id,
        title="Crash on save",
        description="Saving an empty file crashes the editor",
        content="Traceback ...",
        expires_at=utcnow() + timedelta(hours=24),
    )
    db_session.add(bug)
    db_session.flush()
    db_session.refresh(bug)
    return bug


@pytest.fixture()
def expired_bug(db_session: Session, bob: User) -> Bug:
    bug = Bug(
        author_id=bob.id,
        title="Old report",
        description="Stale",
        content="...",
        expires_at=utcnow() - timedelta(hours=1),
    )
    db_session.add(bug)
    db_session.flush()
    db_session.refresh(bug)
    return bug
