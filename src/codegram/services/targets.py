"""Lookup of the content item an interaction points at."""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from codegram.core.errors import Gone, NotFound, PermissionDenied
from codegram.models import Bookmark, Bug, Comment, Doc, Like, Notification, Snippet
from codegram.schemas.common import ContentTarget

ContentItem = Snippet | Doc | Bug

CONTENT_MODELS: dict[str, type[Snippet] | type[Doc] | type[Bug]] = {
    "snippet": Snippet,
    "doc": Doc,
    "bug": Bug,
}


def resolve_target(db: Session, target: ContentTarget, *, require_public: bool = False) -> ContentItem:
    """Return the content row ``target`` refers to.

    Raises:
        NotFound: No row with that id exists.
        Gone: The row is a bug report past its expiry.
        PermissionDenied: ``require_public`` is set and the item is private.
    """
    model = CONTENT_MODELS[target.kind]
    item = db.get(model, target.content_id)
    if item is None:
        raise NotFound(f"{target.kind.capitalize()} not found")
    if isinstance(item, Bug) and item.is_expired():
        raise Gone("Bug report has expired")
    if require_public and not item.is_public:
        raise PermissionDenied(f"Cannot comment on private {target.kind}")
    return item


def purge_content(db: Session, kind: str, ids: list[str]) -> int:
    """Delete content rows together with their likes, bookmarks and comments.

    Notifications are kept and lose their content reference. The caller
    commits.
    """
    if not ids:
        return 0
    model = CONTENT_MODELS[kind]
    column = f"{kind}_id"

    comment_ids = db.scalars(select(Comment.id).where(getattr(Comment, column).in_(ids))).all()
    if comment_ids:
        db.execute(
            update(Notification)
            .where(Notification.comment_id.in_(comment_ids))
            .values(comment_id=None)
        )
    db.execute(update(Notification).where(getattr(Notification, column).in_(ids)).values({column: None}))
    db.execute(delete(Like).where(getattr(Like, column).in_(ids)))
    db.execute(delete(Bookmark).where(getattr(Bookmark, column).in_(ids)))
    db.execute(delete(Comment).where(getattr(Comment, column).in_(ids)))
    result = db.execute(delete(model).where(model.id.in_(ids)))
    return result.rowcount or 0
