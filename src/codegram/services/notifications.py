"""Notification lifecycle: durable record first, live push second."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from codegram.models import Notification, NotificationType
from codegram.realtime.events import ServerEvent
from codegram.realtime.gateway import RealtimeGateway
from codegram.schemas.notification import (
    NotificationDetail,
    NotificationPage,
    NotificationResponse,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class NotificationService:
    """Creates, lists and acknowledges notifications."""

    def __init__(self, gateway: RealtimeGateway) -> None:
        self.gateway = gateway

    async def create_notification(
        self,
        db: Session,
        *,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        snippet_id: str | None = None,
        doc_id: str | None = None,
        bug_id: str | None = None,
        comment_id: str | None = None,
    ) -> Notification | None:
        """Persist a notification and push it to ``user:<recipient_id>``.

        Self-actions never notify: nothing is written or pushed when the
        recipient is the sender. The push is best-effort; if it fails the
        committed row stays and the client sees it on its next fetch.

        Returns:
            The stored notification, or None when suppressed.
        """
        if recipient_id == sender_id:
            return None

        notification = Notification(
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=type,
            snippet_id=snippet_id,
            doc_id=doc_id,
            bug_id=bug_id,
            comment_id=comment_id,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)

        await self._push(notification)
        return notification

    async def notify(self, db: Session, **fields: object) -> Notification | None:
        """Like :meth:`create_notification` but never raises.

        Used after a triggering write has already been committed, which a
        notification failure must not undo or turn into an error response.
        """
        try:
            return await self.create_notification(db, **fields)  # type: ignore[arg-type]
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Failed to store %s notification for %s",
                fields.get("type"),
                fields.get("recipient_id"),
            )
            return None

    async def _push(self, notification: Notification) -> None:
        try:
            payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
            await self.gateway.emit_to_user(
                notification.recipient_id,
                ServerEvent.NEW_NOTIFICATION.value,
                payload,
            )
        except Exception:
            logger.exception(
                "Failed to push notification %s to %s",
                notification.id,
                notification.recipient_id,
            )

    def get_notifications(
        self,
        db: Session,
        user_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> NotificationPage:
        """Return one page of the user's notifications, newest first."""
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        rows = db.scalars(
            select(Notification)
            .where(Notification.recipient_id == user_id)
            .options(
                selectinload(Notification.snippet),
                selectinload(Notification.doc),
                selectinload(Notification.bug),
                selectinload(Notification.comment),
            )
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).unique().all()

        total = db.scalar(
            select(func.count()).select_from(Notification).where(Notification.recipient_id == user_id)
        ) or 0

        return NotificationPage(
            notifications=[NotificationDetail.model_validate(row) for row in rows],
            total=total,
            page=page,
            limit=limit,
        )

    def mark_notifications_as_read(
        self,
        db: Session,
        user_id: str,
        notification_ids: list[str] | None = None,
    ) -> int:
        """Mark the user's notifications read, optionally only ``notification_ids``.

        Ids belonging to other recipients are ignored.
        """
        stmt = update(Notification).where(Notification.recipient_id == user_id)
        if notification_ids:
            stmt = stmt.where(Notification.id.in_(notification_ids))
        result = db.execute(stmt.values(read=True).execution_options(synchronize_session="fetch"))
        db.commit()
        return result.rowcount or 0

    def get_unread_notification_count(self, db: Session, user_id: str) -> int:
        return db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient_id == user_id, Notification.read.is_(False))
        ) or 0

