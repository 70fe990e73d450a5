# src/codegram/models/__init__.py
"""SQLAlchemy models for the CodeGram application."""

from .comment import Comment
from .content import Bug, BugSeverity, BugStatus, Doc, Snippet
from .interaction import Bookmark, Follow, Like
from .notification import Notification, NotificationType
from .user import Block, User, UserRole

__all__ = [
    "Block", "User", "UserRole",
    "Bug", "BugSeverity", "BugStatus", "Doc", "Snippet",
    "Bookmark", "Follow", "Like",
    "Comment",
    "Notification", "NotificationType",
]
