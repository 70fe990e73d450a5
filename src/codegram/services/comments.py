"""Comment CRUD with live sync to the content room."""

from __future__ import annotations

import logging
import math
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from codegram.core.errors import NotFound, PermissionDenied
from codegram.models import Comment, Notification, NotificationType, User
from codegram.realtime.events import ServerEvent
from codegram.realtime.gateway import RealtimeGateway
from codegram.schemas.comment import CommentCreate, CommentPage, CommentResponse, CommentThread
from codegram.schemas.common import ContentTarget

from .notifications import NotificationService
from .targets import resolve_target

logger = logging.getLogger(__name__)


class CommentService:
    """Writes comments, notifies content authors and syncs open comment views.

    The room broadcast and the notification are independent: the first
    keeps every open view of the content current, the second is the
    durable record for the author.
    """

    def __init__(self, gateway: RealtimeGateway, notifications: NotificationService) -> None:
        self.gateway = gateway
        self.notifications = notifications

    async def _broadcast(self, content_id: str | None, event: ServerEvent, payload: Any) -> None:
        if content_id is None:
            return
        try:
            await self.gateway.emit_to_content(content_id, event.value, payload)
        except Exception:
            logger.exception("Failed to broadcast %s to content %s", event.value, content_id)

    def _get_comment(self, db: Session, comment_id: str) -> Comment:
        comment = db.get(Comment, comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        return comment

    async def create_comment(self, db: Session, author: User, data: CommentCreate) -> Comment:
        """Store a comment or reply and fan it out.

        Replies to a reply are attached to the top-level comment so threads
        stay one level deep.
        """
        target = data.target()
        item = resolve_target(db, target, require_public=True)

        parent_id = None
        if data.parent_id:
            parent = db.get(Comment, data.parent_id)
            if parent is None or parent.content_id != target.content_id:
                raise NotFound("Parent comment not found")
            parent_id = parent.parent_id or parent.id

        comment = Comment(
            content=data.content,
            author_id=author.id,
            parent_id=parent_id,
            **{f"{target.kind}_id": target.content_id},
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        payload = CommentResponse.model_validate(comment).model_dump(mode="json")

        await self.notifications.notify(
            db,
            recipient_id=item.author_id,
            sender_id=author.id,
            type=NotificationType.REPLY if parent_id else NotificationType.COMMENT,
            comment_id=comment.id,
            **{f"{target.kind}_id": target.content_id},
        )
        await self._broadcast(target.content_id, ServerEvent.NEW_COMMENT, payload)
        return comment

    async def update_comment(
        self, db: Session, actor: User, comment_id: str, content: str
    ) -> Comment:
        comment = self._get_comment(db, comment_id)
        if comment.author_id != actor.id:
            raise PermissionDenied("Not authorized to update this comment")

        comment.content = content
        db.commit()
        db.refresh(comment)

        await self._broadcast(
            comment.content_id,
            ServerEvent.COMMENT_UPDATED,
            CommentResponse.model_validate(comment).model_dump(mode="json"),
        )
        return comment

    async def delete_comment(self, db: Session, actor: User, comment_id: str) -> None:
        """Delete a comment and its replies. Author or admin only."""
        comment = self._get_comment(db, comment_id)
        if comment.author_id != actor.id and not actor.is_admin:
            raise PermissionDenied("Not authorized to delete this comment")

        content_id = comment.content_id
        doomed = [comment.id, *db.scalars(select(Comment.id).where(Comment.parent_id == comment.id))]
        db.execute(
            update(Notification).where(Notification.comment_id.in_(doomed)).values(comment_id=None)
        )
        db.execute(delete(Comment).where(Comment.parent_id == comment.id))
        db.delete(comment)
        db.commit()

        await self._broadcast(
            content_id,
            ServerEvent.COMMENT_DELETED,
            {"commentId": comment_id, "contentId": content_id},
        )

    def list_comments(
        self, db: Session, target: ContentTarget, page: int = 1, limit: int = 10
    ) -> CommentPage:
        """Top-level comments newest first, each with its replies oldest first."""
        resolve_target(db, target)
        page = max(page, 1)
        limit = min(max(limit, 1), 100)

        on_target = getattr(Comment, f"{target.kind}_id") == target.content_id
        total = db.scalar(
            select(func.count()).select_from(Comment).where(on_target, Comment.parent_id.is_(None))
        ) or 0
        roots = db.scalars(
            select(Comment)
            .where(on_target, Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).unique().all()

        replies: dict[str, list[CommentResponse]] = {root.id: [] for root in roots}
        if roots:
            for reply in db.scalars(
                select(Comment)
                .where(Comment.parent_id.in_(list(replies)))
                .order_by(Comment.created_at.asc(), Comment.id.asc())
            ).unique():
                replies[reply.parent_id].append(CommentResponse.model_validate(reply))  # type: ignore[index]

        threads = [
            CommentThread.model_validate(root).model_copy(update={"replies": replies[root.id]})
            for root in roots
        ]
        return CommentPage(
            comments=threads,
            total=total,
            pages=math.ceil(total / limit),
            current_page=page,
        )
