# src/codegram/api/v1/endpoints/follows.py
"""Follow graph endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from codegram.schemas.interaction import FollowStatus
from codegram.schemas.user import SuggestedUser, UserListPage

from ..dependencies import (
    CurrentUserDep,
    InteractionServiceDep,
    PaginationDep,
    SessionDep,
    UserIdPath,
)

router = APIRouter(prefix="/follows", tags=["follows"])


@router.get("/suggestions", response_model=list[SuggestedUser])
async def suggested_users(
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> list[SuggestedUser]:
    """Accounts the current user does not follow yet, most followed first."""
    return interactions.get_suggested_users(db, current_user.id, limit)


@router.post("/{user_id}", response_model=FollowStatus)
async def toggle_follow(
    user_id: UserIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> FollowStatus:
    """Follow ``user_id``, or unfollow when already following."""
    result = await interactions.toggle_follow(db, current_user, user_id)
    return FollowStatus(
        following=result.active,
        message="Followed successfully" if result.active else "Unfollowed successfully",
    )


@router.get("/{user_id}/check", response_model=FollowStatus)
async def check_follow(
    user_id: UserIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
    interactions: InteractionServiceDep,
) -> FollowStatus:
    return FollowStatus(following=interactions.is_following(db, current_user.id, user_id))


@router.get("/{user_id}/followers", response_model=UserListPage)
async def list_followers(
    user_id: UserIdPath,
    db: SessionDep,
    interactions: InteractionServiceDep,
    pagination: PaginationDep,
) -> UserListPage:
    return interactions.get_followers(db, user_id, pagination.page, pagination.limit)


@router.get("/{user_id}/following", response_model=UserListPage)
async def list_following(
    user_id: UserIdPath,
    db: SessionDep,
    interactions: InteractionServiceDep,
    pagination: PaginationDep,
) -> UserListPage:
    return interactions.get_following(db, user_id, pagination.page, pagination.limit)
