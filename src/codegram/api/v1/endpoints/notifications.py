# src/codegram/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from fastapi import APIRouter

from codegram.schemas.notification import (
    MarkReadRequest,
    MarkReadResult,
    NotificationPage,
    UnreadCount,
)

from ..dependencies import CurrentUserDep, NotificationServiceDep, PaginationDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationPage)
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
    pagination: PaginationDep,
) -> NotificationPage:
    """Return the current user's notifications, newest first."""
    return notifications.get_notifications(db, current_user.id, pagination.page, pagination.limit)


@router.post("/read", response_model=MarkReadResult)
async def mark_read(
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
    body: MarkReadRequest | None = None,
) -> MarkReadResult:
    """Mark the given notifications read, or all of them when no ids are sent."""
    ids = body.notification_ids if body else None
    return MarkReadResult(updated=notifications.mark_notifications_as_read(db, current_user.id, ids))


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> UnreadCount:
    return UnreadCount(count=notifications.get_unread_notification_count(db, current_user.id))
