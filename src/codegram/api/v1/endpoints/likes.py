# src/codegram/api/v1/endpoints/likes.py
"""Like toggle and listing endpoints."""

from fastapi import APIRouter

from codegram.schemas.interaction import LikeRequest, LikeStatus, SavedContentType, UserLikesPage

from ..dependencies import (
    ContentTargetQuery,
    CurrentUserDep,
    InteractionServiceDep,
    PaginationDep,
    SavedTypeQuery,
    SessionDep,
    UserIdPath,
)

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("", response_model=LikeStatus)
async def toggle_like(
    like_data: LikeRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> LikeStatus:
    """Like the target, or remove an existing like."""
    result = await interactions.toggle_like(db, current_user, like_data)
    return LikeStatus(
        liked=result.active,
        message="Liked successfully" if result.active else "Like removed",
    )


@router.get("/check", response_model=LikeStatus)
async def check_like(
    target: ContentTargetQuery,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> LikeStatus:
    return LikeStatus(liked=interactions.is_liked(db, current_user.id, target))


@router.get("/user/{user_id}", response_model=UserLikesPage)
async def list_user_likes(
    user_id: UserIdPath,
    db: SessionDep,
    interactions: InteractionServiceDep,
    pagination: PaginationDep,
    content_type: SavedTypeQuery = SavedContentType.ALL,
) -> UserLikesPage:
    """Content a user has liked, optionally narrowed to snippets, docs or bugs."""
    return interactions.get_user_likes(
        db, user_id, content_type, pagination.page, pagination.limit
    )
