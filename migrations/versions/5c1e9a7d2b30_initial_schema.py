"""initial schema

Revision ID: 5c1e9a7d2b30
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d2b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TARGETS = ("snippet", "doc", "bug")
ONE_TARGET = " + ".join(
    f"(CASE WHEN {kind}_id IS NOT NULL THEN 1 ELSE 0 END)" for kind in TARGETS
) + " = 1"

NOTIFICATION_TYPES = ("LIKE", "COMMENT", "REPLY", "FOLLOW", "BOOKMARK", "BUG_STATUS_UPDATE")


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=36), nullable=False)


def _user_fk(name: str) -> sa.Column:
    return sa.Column(name, sa.String(length=36), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _target_columns(ondelete: str) -> list[sa.SchemaItem]:
    items: list[sa.SchemaItem] = []
    for kind in TARGETS:
        items.append(sa.Column(f"{kind}_id", sa.String(length=36), nullable=True))
        items.append(sa.ForeignKeyConstraint([f"{kind}_id"], [f"{kind}.id"], ondelete=ondelete))
    return items


def upgrade() -> None:
    """Create users, content, interaction and notification tables."""
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("role", sa.Enum("USER", "ADMIN", name="userrole", native_enum=False, length=16), nullable=False),
        sa.Column("is_blocked", sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "block",
        _id(),
        _user_fk("blocker_id"),
        _user_fk("blocked_id"),
        _created_at(),
        sa.ForeignKeyConstraint(["blocker_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["blocked_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("blocker_id", "blocked_id", name="uq_block_pair"),
        sa.CheckConstraint("blocker_id <> blocked_id", name="ck_block_not_self"),
    )

    op.create_table(
        "snippet",
        _id(),
        _user_fk("author_id"),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=50), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_snippet_author_id", "snippet", ["author_id"])
    op.create_table(
        "doc",
        _id(),
        _user_fk("author_id"),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_doc_author_id", "doc", ["author_id"])
    op.create_table(
        "bug",
        _id(),
        _user_fk("author_id"),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "severity",
            sa.Enum("LOW", "MEDIUM", "HIGH", "CRITICAL", name="bugseverity", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("OPEN", "IN_PROGRESS", "RESOLVED", "CLOSED", name="bugstatus", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bug_author_id", "bug", ["author_id"])
    op.create_index("ix_bug_expires_at", "bug", ["expires_at"])

    for table, prefix in (("content_like", "like"), ("bookmark", "bookmark")):
        op.create_table(
            table,
            _id(),
            _user_fk("user_id"),
            *_target_columns("CASCADE"),
            _created_at(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.CheckConstraint(ONE_TARGET, name=f"ck_{table}_one_target"),
            *(
                sa.UniqueConstraint("user_id", f"{kind}_id", name=f"uq_{prefix}_user_{kind}")
                for kind in TARGETS
            ),
        )

    op.create_table(
        "follow",
        _id(),
        _user_fk("follower_id"),
        _user_fk("following_id"),
        _created_at(),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
    )
    op.create_index("ix_follow_following_id", "follow", ["following_id"])

    op.create_table(
        "comment",
        _id(),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk("author_id"),
        *_target_columns("CASCADE"),
        sa.Column("parent_id", sa.String(length=36), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comment.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(ONE_TARGET, name="ck_comment_one_target"),
    )
    op.create_index("ix_comment_parent_id", "comment", ["parent_id"])

    op.create_table(
        "notification",
        _id(),
        _user_fk("recipient_id"),
        _user_fk("sender_id"),
        sa.Column(
            "type",
            sa.Enum(*NOTIFICATION_TYPES, name="notificationtype", native_enum=False, length=32),
            nullable=False,
        ),
        *_target_columns("SET NULL"),
        sa.Column("comment_id", sa.String(length=36), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["comment_id"], ["comment.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notification_recipient_created", "notification", ["recipient_id", "created_at"]
    )
    op.create_index("ix_notification_recipient_read", "notification", ["recipient_id", "read"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_notification_recipient_read", table_name="notification")
    op.drop_index("ix_notification_recipient_created", table_name="notification")
    op.drop_table("notification")
    op.drop_index("ix_comment_parent_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("ix_follow_following_id", table_name="follow")
    op.drop_table("follow")
    op.drop_table("bookmark")
    op.drop_table("content_like")
    op.drop_index("ix_bug_expires_at", table_name="bug")
    op.drop_index("ix_bug_author_id", table_name="bug")
    op.drop_table("bug")
    op.drop_index("ix_doc_author_id", table_name="doc")
    op.drop_table("doc")
    op.drop_index("ix_snippet_author_id", table_name="snippet")
    op.drop_table("snippet")
    op.drop_table("block")
    op.drop_table("users")
