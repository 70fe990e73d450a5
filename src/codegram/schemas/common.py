"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Self

from pydantic import BaseModel, Field, model_validator


class ContentTarget(BaseModel):
    """Reference to exactly one snippet, doc or bug."""

    snippet_id: str | None = Field(None, min_length=1, max_length=36)
    doc_id: str | None = Field(None, min_length=1, max_length=36)
    bug_id: str | None = Field(None, min_length=1, max_length=36)

    @model_validator(mode="after")
    def _exactly_one_target(self) -> Self:
        targets = [value for value in (self.snippet_id, self.doc_id, self.bug_id) if value]
        if len(targets) != 1:
            raise ValueError("Target must reference exactly one content type")
        return self

    @property
    def kind(self) -> str:
        """Return ``snippet``, ``doc`` or ``bug``."""
        if self.snippet_id:
            return "snippet"
        if self.doc_id:
            return "doc"
        return "bug"

    @property
    def content_id(self) -> str:
        """Return the single identifier that is set."""
        return self.snippet_id or self.doc_id or self.bug_id  # type: ignore[return-value]


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
