# src/codegram/models/comment.py
"""Comments and replies attached to a piece of content."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codegram.db.session import Base
from codegram.db.time import utcnow

from .interaction import exactly_one_target
from .user import User, new_id


class Comment(Base):
    """Comment on exactly one snippet, doc or bug; replies set ``parent_id``."""

    __tablename__ = "comment"
    __table_args__ = (
        exactly_one_target("comment"),
        Index("ix_comment_parent_id", "parent_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
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
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author: Mapped[User] = relationship(User, lazy="joined")

    @property
    def content_id(self) -> str | None:
        """Identifier of the content item this comment belongs to."""
        return self.snippet_id or self.doc_id or self.bug_id
