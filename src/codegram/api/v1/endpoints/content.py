# src/codegram/api/v1/endpoints/content.py
"""Publishing endpoints for snippets, docs and bug reports."""

import enum
from typing import Annotated

from fastapi import APIRouter, Path, status

from codegram.schemas.common import MessageResponse
from codegram.schemas.content import (
    BugCreate,
    BugResponse,
    BugStatusUpdate,
    DocCreate,
    DocResponse,
    SnippetCreate,
    SnippetResponse,
)

from ..dependencies import ContentServiceDep, CurrentUserDep, SessionDep

router = APIRouter(tags=["content"])

ContentIdPath = Annotated[str, Path(min_length=1, max_length=36)]


class ContentKind(str, enum.Enum):
    """Collection names accepted by the generic delete route."""

    SNIPPETS = "snippets"
    DOCS = "docs"
    BUGS = "bugs"

    @property
    def singular(self) -> str:
        return self.value[:-1]


@router.post("/snippets", response_model=SnippetResponse, status_code=status.HTTP_201_CREATED)
async def create_snippet(
    snippet_data: SnippetCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    content: ContentServiceDep,
) -> SnippetResponse:
    """Publish a snippet; public ones are pushed to followers as ``new-snippet``."""
    snippet = await content.create_snippet(db, current_user, snippet_data)
    return SnippetResponse.model_validate(snippet)


@router.post("/docs", response_model=DocResponse, status_code=status.HTTP_201_CREATED)
async def create_doc(
    doc_data: DocCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    content: ContentServiceDep,
) -> DocResponse:
    doc = await content.create_doc(db, current_user, doc_data)
    return DocResponse.model_validate(doc)


@router.post("/bugs", response_model=BugResponse, status_code=status.HTTP_201_CREATED)
async def create_bug(
    bug_data: BugCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    content: ContentServiceDep,
) -> BugResponse:
    bug = await content.create_bug(db, current_user, bug_data)
    return BugResponse.model_validate(bug)


@router.patch("/bugs/{bug_id}/status", response_model=BugResponse)
async def update_bug_status(
    bug_id: ContentIdPath,
    status_data: BugStatusUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    content: ContentServiceDep,
) -> BugResponse:
    bug = await content.update_bug_status(db, current_user, bug_id, status_data.status)
    return BugResponse.model_validate(bug)


@router.delete("/{kind}/{content_id}", response_model=MessageResponse)
async def delete_content(
    kind: ContentKind,
    content_id: ContentIdPath,
    current_user: CurrentUserDep,
    db: SessionDep,
    content: ContentServiceDep,
) -> MessageResponse:
    content.delete_content(db, current_user, kind.singular, content_id)
    return MessageResponse(message=f"{kind.singular.capitalize()} deleted successfully")
