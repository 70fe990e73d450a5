# src/codegram/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    bookmarks_router,
    comments_router,
    content_router,
    follows_router,
    likes_router,
    notifications_router,
    realtime_router,
)

__all__ = [
    "bookmarks_router",
    "comments_router",
    "content_router",
    "follows_router",
    "likes_router",
    "notifications_router",
    "realtime_router",
]
