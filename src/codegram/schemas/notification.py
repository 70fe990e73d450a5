"""Notification schemas returned by the API and pushed over sockets."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from codegram.models.notification import NotificationType

from .user import UserSummary


class ContentRef(BaseModel):
    id: str
    title: str

    model_config = ConfigDict(from_attributes=True)


class CommentRef(BaseModel):
    id: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class NotificationResponse(BaseModel):
    """Notification with the sender's public profile inlined."""

    id: str
    type: NotificationType
    recipient_id: str
    sender_id: str
    sender: UserSummary
    snippet_id: str | None = None
    doc_id: str | None = None
    bug_id: str | None = None
    comment_id: str | None = None
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationDetail(NotificationResponse):
    """Listing entry enriched with a reference to the related content."""

    snippet: ContentRef | None = None
    doc: ContentRef | None = None
    bug: ContentRef | None = None
    comment: CommentRef | None = None


class NotificationPage(BaseModel):
    notifications: list[NotificationDetail]
    total: int
    page: int
    limit: int


class MarkReadRequest(BaseModel):
    """Optional subset of notification ids; omit to mark everything read."""

    notification_ids: list[str] | None = Field(None, max_length=500)


class UnreadCount(BaseModel):
    count: int


class MarkReadResult(BaseModel):
    updated: int
