# src/codegram/api/v1/endpoints/comments.py
"""Comment endpoints. Every mutation is mirrored to the content's live room."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from codegram.schemas.comment import CommentCreate, CommentPage, CommentResponse, CommentUpdate
from codegram.schemas.common import MessageResponse

from ..dependencies import (
    CommentServiceDep,
    ContentTargetQuery,
    CurrentUserDep,
    PaginationDep,
    SessionDep,
)

router = APIRouter(prefix="/comments", tags=["comments"])

CommentIdPath = Annotated[str, Path(min_length=1, max_length=36)]


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    comments: CommentServiceDep,
) -> CommentResponse:
    comment = await comments.create_comment(db, current_user, comment_data)
    return CommentResponse.model_validate(comment)


@router.get("", response_model=CommentPage)
async def list_comments(
    target: ContentTargetQuery,
    db: SessionDep,
    comments: CommentServiceDep,
    pagination: PaginationDep,
) -> CommentPage:
    return comments.list_comments(db, target, pagination.page, pagination.limit)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: CommentIdPath,
    comment_data: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    comments: CommentServiceDep,
) -> CommentResponse:
    comment = await comments.update_comment(db, current_user, comment_id, comment_data.content)
    return CommentResponse.model_validate(comment)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: CommentIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
    comments: CommentServiceDep,
) -> MessageResponse:
    await comments.delete_comment(db, current_user, comment_id)
    return MessageResponse(message="Comment deleted successfully")
