# src/codegram/models/notification.py
"""Durable notification log."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codegram.db.session import Base
from codegram.db.time import utcnow

from .comment import Comment
from .content import Bug, Doc, Snippet
from .user import User, new_id


class NotificationType(str, enum.Enum):
    LIKE = "LIKE"
    COMMENT = "COMMENT"
    REPLY = "REPLY"
    FOLLOW = "FOLLOW"
    BOOKMARK = "BOOKMARK"
    BUG_STATUS_UPDATE = "BUG_STATUS_UPDATE"


class Notification(Base):
    """Something a sender did that the recipient should hear about.

    Rows are immutable apart from ``read``. Content references are nulled
    rather than cascaded when the content goes away so the log survives.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
        Index("ix_notification_recipient_read", "recipient_id", "read"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    recipient_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, native_enum=False, length=32), nullable=False
    )
    snippet_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("snippet.id", ondelete="SET NULL"), nullable=True
    )
    doc_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("doc.id", ondelete="SET NULL"), nullable=True
    )
    bug_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bug.id", ondelete="SET NULL"), nullable=True
    )
    comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id", ondelete="SET NULL"), nullable=True
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    sender: Mapped[User] = relationship(User, foreign_keys=[sender_id], lazy="joined")
    snippet: Mapped[Snippet | None] = relationship(Snippet)
    doc: Mapped[Doc | None] = relationship(Doc)
    bug: Mapped[Bug | None] = relationship(Bug)
    comment: Mapped[Comment | None] = relationship(Comment)
