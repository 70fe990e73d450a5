"""Schemas for snippets, docs and bug reports."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from codegram.models.content import BugSeverity, BugStatus

from .user import UserSummary


class SnippetCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    content: str = Field(..., min_length=1)
    language: str = Field(..., min_length=1, max_length=50)
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True


class DocCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    is_public: bool = True


class BugCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    severity: BugSeverity = BugSeverity.MEDIUM
    tags: list[str] = Field(default_factory=list)


class BugStatusUpdate(BaseModel):
    status: BugStatus


class SnippetResponse(BaseModel):
    """Snippet as pushed to followers and returned by the API."""

    id: str
    author_id: str
    author: UserSummary
    title: str
    description: str | None
    content: str
    language: str
    tags: list[str]
    is_public: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocResponse(BaseModel):
    id: str
    author_id: str
    author: UserSummary
    title: str
    content: str
    is_public: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BugResponse(BaseModel):
    id: str
    author_id: str
    author: UserSummary
    title: str
    description: str
    content: str
    severity: BugSeverity
    status: BugStatus
    tags: list[str]
    expires_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
