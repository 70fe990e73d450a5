# src/codegram/models/content.py
"""SQLAlchemy models for the three kinds of shareable content."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codegram.db.session import Base
from codegram.db.time import as_utc, utcnow

from .user import User, new_id


class BugSeverity(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class BugStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class Snippet(Base):
    """A code snippet shared by its author."""

    __tablename__ = "snippet"
    __table_args__ = (Index("ix_snippet_author_id", "author_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship(User, lazy="joined")


class Doc(Base):
    """A long-form markdown document."""

    __tablename__ = "doc"
    __table_args__ = (Index("ix_doc_author_id", "author_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship(User, lazy="joined")


class Bug(Base):
    """A bug report that stays actionable for a limited time.

    Once ``expires_at`` has passed the report is excluded from feeds and
    counts and every interaction on it is rejected as gone.
    """

    __tablename__ = "bug"
    __table_args__ = (
        Index("ix_bug_author_id", "author_id"),
        Index("ix_bug_expires_at", "expires_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[BugSeverity] = mapped_column(
        Enum(BugSeverity, native_enum=False, length=16),
        nullable=False,
        default=BugSeverity.MEDIUM,
    )
    status: Mapped[BugStatus] = mapped_column(
        Enum(BugStatus, native_enum=False, length=16),
        nullable=False,
        default=BugStatus.OPEN,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship(User, lazy="joined")

    # Bugs have no private mode.
    is_public = True

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once the report is past its expiry timestamp."""
        return as_utc(self.expires_at) <= (now or utcnow())
