"""Publishing, bug status changes and deletion of content items."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timedelta

from sqlalchemy.orm import Session

from codegram.core.errors import Gone, NotFound, PermissionDenied
from codegram.core.settings import settings
from codegram.db.time import utcnow
from codegram.models import Bug, BugStatus, Doc, NotificationType, Snippet, User
from codegram.realtime.events import ServerEvent
from codegram.realtime.fanout import FanoutBroadcaster
from codegram.schemas.content import (
    BugCreate,
    BugResponse,
    DocCreate,
    DocResponse,
    SnippetCreate,
    SnippetResponse,
)

from .notifications import NotificationService
from .targets import CONTENT_MODELS, purge_content

logger = logging.getLogger(__name__)

MAX_TAGS = 10
MAX_TAG_LENGTH = 50


def clean_tags(tags: Iterable[str]) -> list[str]:
    """Trim and lower-case tags, dropping empty or oversized ones; keep at most ten."""
    cleaned = [tag.strip().lower() for tag in tags]
    return [tag for tag in cleaned if 0 < len(tag) <= MAX_TAG_LENGTH][:MAX_TAGS]


class ContentService:
    """Creates content and pushes it to the author's followers."""

    def __init__(self, fanout: FanoutBroadcaster, notifications: NotificationService) -> None:
        self.fanout = fanout
        self.notifications = notifications

    async def create_snippet(self, db: Session, author: User, data: SnippetCreate) -> Snippet:
        snippet = Snippet(
            author_id=author.id,
            title=data.title,
            description=data.description,
            content=data.content,
            language=data.language,
            tags=clean_tags(data.tags),
            is_public=data.is_public,
        )
        db.add(snippet)
        db.commit()
        db.refresh(snippet)

        if snippet.is_public:
            await self.fanout.emit_to_followers(
                db,
                author.id,
                ServerEvent.NEW_SNIPPET.value,
                SnippetResponse.model_validate(snippet).model_dump(mode="json"),
            )
        return snippet

    async def create_doc(self, db: Session, author: User, data: DocCreate) -> Doc:
        doc = Doc(
            author_id=author.id,
            title=data.title,
            content=data.content,
            is_public=data.is_public,
        )
        db.add(doc)
        db.commit()
        db.refresh(doc)

        if doc.is_public:
            await self.fanout.emit_to_followers(
                db,
                author.id,
                ServerEvent.NEW_DOC.value,
                DocResponse.model_validate(doc).model_dump(mode="json"),
            )
        return doc

    async def create_bug(self, db: Session, author: User, data: BugCreate) -> Bug:
        """Store a bug report that expires ``BUG_TTL_HOURS`` from now.

        Bugs are always public, so every new report is fanned out.
        """
        bug = Bug(
            author_id=author.id,
            title=data.title,
            description=data.description,
            content=data.content,
            severity=data.severity,
            tags=clean_tags(data.tags),
            expires_at=utcnow() + timedelta(hours=settings.bug_ttl_hours),
        )
        db.add(bug)
        db.commit()
        db.refresh(bug)

        await self.fanout.emit_to_followers(
            db,
            author.id,
            ServerEvent.NEW_BUG.value,
            BugResponse.model_validate(bug).model_dump(mode="json"),
        )
        return bug

    async def update_bug_status(
        self, db: Session, actor: User, bug_id: str, status: BugStatus
    ) -> Bug:
        """Change a bug's status. Author or admin only.

        The author is notified only when someone else made the change.
        """
        bug = db.get(Bug, bug_id)
        if bug is None:
            raise NotFound("Bug not found")
        if bug.is_expired():
            raise Gone("Bug report has expired")
        if bug.author_id != actor.id and not actor.is_admin:
            raise PermissionDenied("Only the author can change the status")

        bug.status = status
        db.commit()
        db.refresh(bug)
        logger.info("Bug %s status set to %s by %s", bug.id, bug.status.value, actor.id)

        if bug.author_id != actor.id:
            await self.notifications.notify(
                db,
                recipient_id=bug.author_id,
                sender_id=actor.id,
                type=NotificationType.BUG_STATUS_UPDATE,
                bug_id=bug.id,
            )
        return bug

    def delete_content(self, db: Session, actor: User, kind: str, content_id: str) -> None:
        """Delete one item with its likes, bookmarks and comments. Author or admin only."""
        model = CONTENT_MODELS.get(kind)
        if model is None:
            raise NotFound("Unknown content type")
        item = db.get(model, content_id)
        if item is None:
            raise NotFound(f"{kind.capitalize()} not found")
        if item.author_id != actor.id and not actor.is_admin:
            raise PermissionDenied(f"Not authorized to delete this {kind}")

        purge_content(db, kind, [content_id])
        db.commit()
        logger.info("Deleted %s %s by %s", kind, content_id, actor.id)
