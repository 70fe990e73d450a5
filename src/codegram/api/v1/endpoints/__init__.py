# src/codegram/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .bookmarks import router as bookmarks_router
from .comments import router as comments_router
from .content import router as content_router
from .follows import router as follows_router
from .likes import router as likes_router
from .notifications import router as notifications_router
from .realtime import router as realtime_router

__all__ = [
    "bookmarks_router",
    "comments_router",
    "content_router",
    "follows_router",
    "likes_router",
    "notifications_router",
    "realtime_router",
]
