# src/codegram/api/v1/endpoints/bookmarks.py
"""Bookmark toggle and listing endpoints."""

from fastapi import APIRouter

from codegram.schemas.interaction import (
    BookmarkRequest,
    BookmarkStatus,
    SavedContentType,
    UserBookmarksPage,
)

from ..dependencies import (
    ContentTargetQuery,
    CurrentUserDep,
    InteractionServiceDep,
    PaginationDep,
    SavedTypeQuery,
    SessionDep,
    UserIdPath,
)

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("", response_model=BookmarkStatus)
async def toggle_bookmark(
    bookmark_data: BookmarkRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> BookmarkStatus:
    """Bookmark the target, or remove an existing bookmark."""
    result = await interactions.toggle_bookmark(db, current_user, bookmark_data)
    return BookmarkStatus(
        bookmarked=result.active,
        message="Bookmarked successfully" if result.active else "Bookmark removed",
    )


@router.get("/check", response_model=BookmarkStatus)
async def check_bookmark(
    target: ContentTargetQuery,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> BookmarkStatus:
    return BookmarkStatus(bookmarked=interactions.is_bookmarked(db, current_user.id, target))


@router.get("/user/{user_id}", response_model=UserBookmarksPage)
async def list_user_bookmarks(
    user_id: UserIdPath,
    db: SessionDep,
    interactions: InteractionServiceDep,
    pagination: PaginationDep,
    content_type: SavedTypeQuery = SavedContentType.ALL,
) -> UserBookmarksPage:
    return interactions.get_user_bookmarks(
        db, user_id, content_type, pagination.page, pagination.limit
    )
