"""Schemas for like, bookmark and follow toggles."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from .common import ContentTarget
from .content import BugResponse, DocResponse, SnippetResponse


class LikeRequest(ContentTarget):
    """Body of ``POST /likes``."""


class BookmarkRequest(ContentTarget):
    """Body of ``POST /bookmarks``."""


class LikeStatus(BaseModel):
    liked: bool
    message: str | None = None


class BookmarkStatus(BaseModel):
    bookmarked: bool
    message: str | None = None


class FollowStatus(BaseModel):
    following: bool
    message: str | None = None


class SavedContentType(str, Enum):
    """``type`` filter for a user's liked or bookmarked content."""

    ALL = "all"
    SNIPPETS = "snippets"
    DOCS = "docs"
    BUGS = "bugs"

    @property
    def kind(self) -> str | None:
        """Singular content kind, or None for ``all``."""
        return None if self is SavedContentType.ALL else self.value[:-1]


class SavedItem(BaseModel):
    """One like or bookmark with the content it points at."""

    id: str
    created_at: datetime
    snippet: SnippetResponse | None = None
    doc: DocResponse | None = None
    bug: BugResponse | None = None


class UserLikesPage(BaseModel):
    likes: list[SavedItem]
    total: int
    pages: int
    current_page: int


class UserBookmarksPage(BaseModel):
    bookmarks: list[SavedItem]
    total: int
    pages: int
    current_page: int
