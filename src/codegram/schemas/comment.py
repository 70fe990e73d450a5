"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import ContentTarget
from .user import UserSummary


class CommentCreate(ContentTarget):
    """Body of ``POST /comments``; ``parent_id`` turns the comment into a reply."""

    content: str = Field(..., min_length=1, max_length=1000)
    parent_id: str | None = Field(None, min_length=1, max_length=36)

    def target(self) -> ContentTarget:
        return ContentTarget(snippet_id=self.snippet_id, doc_id=self.doc_id, bug_id=self.bug_id)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    """Comment with its author inlined, as broadcast to content rooms."""

    id: str
    content: str
    author_id: str
    author: UserSummary
    snippet_id: str | None
    doc_id: str | None
    bug_id: str | None
    parent_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentThread(CommentResponse):
    replies: list[CommentResponse] = Field(default_factory=list)


class CommentPage(BaseModel):
    comments: list[CommentThread]
    total: int
    pages: int
    current_page: int
