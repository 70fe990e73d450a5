"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentPage, CommentResponse, CommentThread, CommentUpdate
from .common import ContentTarget, MessageResponse
from .content import (
    BugCreate,
    BugResponse,
    BugStatusUpdate,
    DocCreate,
    DocResponse,
    SnippetCreate,
    SnippetResponse,
)
from .interaction import (
    BookmarkRequest,
    BookmarkStatus,
    FollowStatus,
    LikeRequest,
    LikeStatus,
    SavedContentType,
    SavedItem,
    UserBookmarksPage,
    UserLikesPage,
)
from .notification import (
    MarkReadRequest,
    MarkReadResult,
    NotificationDetail,
    NotificationPage,
    NotificationResponse,
    UnreadCount,
)
from .user import SuggestedUser, UserListPage, UserProfile, UserSummary

__all__ = [
    "CommentCreate", "CommentPage", "CommentResponse", "CommentThread", "CommentUpdate",
    "ContentTarget", "MessageResponse",
    "BugCreate", "BugResponse", "BugStatusUpdate",
    "DocCreate", "DocResponse", "SnippetCreate", "SnippetResponse",
    "BookmarkRequest", "BookmarkStatus", "FollowStatus", "LikeRequest", "LikeStatus",
    "SavedContentType", "SavedItem", "UserBookmarksPage", "UserLikesPage",
    "MarkReadRequest", "MarkReadResult", "NotificationDetail", "NotificationPage", "NotificationResponse",
    "UnreadCount",
    "SuggestedUser", "UserListPage", "UserProfile", "UserSummary",
]
