"""Business logic services for CodeGram."""

from .comments import CommentService
from .content import ContentService, clean_tags
from .interactions import InteractionService, ToggleResult
from .maintenance import ExpiredBugSweeper
from .notifications import NotificationService
from .targets import CONTENT_MODELS, purge_content, resolve_target

__all__ = [
    "CommentService",
    "ContentService",
    "clean_tags",
    "InteractionService",
    "ToggleResult",
    "ExpiredBugSweeper",
    "NotificationService",
    "CONTENT_MODELS",
    "purge_content",
    "resolve_target",
]
