# src/codegram/models/interaction.py
"""Join entities for likes, bookmarks and follows.

Each row is a single active relationship. Toggling off hard-deletes the
row, so the unique constraints below are the only thing standing between
two concurrent activations and a duplicate.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from codegram.db.session import Base
from codegram.db.time import utcnow

from .user import new_id

TARGET_COLUMNS = ("snippet_id", "doc_id", "bug_id")


def exactly_one_target(table: str) -> CheckConstraint:
    """CHECK constraint requiring exactly one of the content references."""
    expr = " + ".join(
        f"(CASE WHEN {column} IS NOT NULL THEN 1 ELSE 0 END)" for column in TARGET_COLUMNS
    )
    return CheckConstraint(f"{expr} = 1", name=f"ck_{table}_one_target")


class Like(Base):
    """A user's like on exactly one snippet, doc or bug."""

    __tablename__ = "content_like"
    __table_args__ = (
        exactly_one_target("content_like"),
        UniqueConstraint("user_id", "snippet_id", name="uq_like_user_snippet"),
        UniqueConstraint("user_id", "doc_id", name="uq_like_user_doc"),
        UniqueConstraint("user_id", "bug_id", name="uq_like_user_bug"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    snippet_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("snippet.id", ondelete="CASCADE"), nullable=True
    )
    doc_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("doc.id", ondelete="CASCADE"), nullable=True
    )
    bug_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bug.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Bookmark(Base):
    """A user's saved reference to exactly one snippet, doc or bug."""

    __tablename__ = "bookmark"
    __table_args__ = (
        exactly_one_target("bookmark"),
        UniqueConstraint("user_id", "snippet_id", name="uq_bookmark_user_snippet"),
        UniqueConstraint("user_id", "doc_id", name="uq_bookmark_user_doc"),
        UniqueConstraint("user_id", "bug_id", name="uq_bookmark_user_bug"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    snippet_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("snippet.id", ondelete="CASCADE"), nullable=True
    )
    doc_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("doc.id", ondelete="CASCADE"), nullable=True
    )
    bug_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bug.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Follow(Base):
    """Directed follow edge from ``follower_id`` to ``following_id``."""

    __tablename__ = "follow"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
        Index("ix_follow_following_id", "following_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    follower_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    following_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
