"""Like, bookmark and follow toggles plus the read-side queries around them."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, delete, exists, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codegram.core.errors import NotFound, ValidationFailed
from codegram.models import (
    Block,
    Bookmark,
    Doc,
    Follow,
    Like,
    Notification,
    NotificationType,
    Snippet,
    User,
)
from codegram.realtime.events import ServerEvent
from codegram.realtime.gateway import RealtimeGateway
from codegram.schemas.common import ContentTarget
from codegram.schemas.content import BugResponse, DocResponse, SnippetResponse
from codegram.schemas.interaction import (
    SavedContentType,
    SavedItem,
    UserBookmarksPage,
    UserLikesPage,
)
from codegram.schemas.user import SuggestedUser, UserListPage, UserProfile, UserSummary

from .notifications import NotificationService
from .targets import CONTENT_MODELS, resolve_target

logger = logging.getLogger(__name__)

SAVED_RESPONSES: dict[str, type[SnippetResponse] | type[DocResponse] | type[BugResponse]] = {
    "snippet": SnippetResponse,
    "doc": DocResponse,
    "bug": BugResponse,
}


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of one toggle call.

    ``notification`` is only set when this call performed the activation and
    the target's author is someone other than the actor.
    """

    active: bool
    notification: Notification | None = None


class InteractionService:
    """Idempotent toggles over the like, bookmark and follow join tables."""

    def __init__(self, gateway: RealtimeGateway, notifications: NotificationService) -> None:
        self.gateway = gateway
        self.notifications = notifications

    @staticmethod
    def _flip(db: Session, model: type[Any], values: dict[str, Any]) -> tuple[bool, bool]:
        """Delete the row matching ``values`` or insert it if none was deleted.

        Returns:
            ``(active, created)``. ``created`` is False when the row was
            removed, or when a concurrent call inserted it first.
        """
        criteria = [getattr(model, column) == value for column, value in values.items()]
        removed = db.execute(delete(model).where(*criteria)).rowcount
        if removed:
            db.commit()
            return False, False

        try:
            with db.begin_nested():
                db.add(model(**values))
        except IntegrityError:
            logger.info("Concurrent activation on %s for %s", model.__tablename__, values)
            db.commit()
            return True, False
        db.commit()
        return True, True

    async def _toggle_content(
        self,
        db: Session,
        model: type[Like] | type[Bookmark],
        actor: User,
        target: ContentTarget,
        notification_type: NotificationType,
    ) -> ToggleResult:
        item = resolve_target(db, target)
        active, created = self._flip(
            db, model, {"user_id": actor.id, f"{target.kind}_id": target.content_id}
        )
        if not created:
            return ToggleResult(active=active)

        notification = await self.notifications.notify(
            db,
            recipient_id=item.author_id,
            sender_id=actor.id,
            type=notification_type,
            **{f"{target.kind}_id": target.content_id},
        )
        return ToggleResult(active=True, notification=notification)

    async def toggle_like(self, db: Session, actor: User, target: ContentTarget) -> ToggleResult:
        return await self._toggle_content(db, Like, actor, target, NotificationType.LIKE)

    async def toggle_bookmark(
        self, db: Session, actor: User, target: ContentTarget
    ) -> ToggleResult:
        return await self._toggle_content(db, Bookmark, actor, target, NotificationType.BOOKMARK)

    async def toggle_follow(self, db: Session, actor: User, followee_id: str) -> ToggleResult:
        """Follow or unfollow ``followee_id``.

        Self-follow is rejected before the followee is looked up. A fresh
        follow stores a FOLLOW notification and pushes ``new-follower`` with
        the follower's summary to the followee.
        """
        if followee_id == actor.id:
            raise ValidationFailed("Cannot follow yourself")
        if db.get(User, followee_id) is None:
            raise NotFound("User not found")

        active, created = self._flip(
            db, Follow, {"follower_id": actor.id, "following_id": followee_id}
        )
        if not created:
            return ToggleResult(active=active)

        notification = await self.notifications.notify(
            db,
            recipient_id=followee_id,
            sender_id=actor.id,
            type=NotificationType.FOLLOW,
        )
        try:
            await self.gateway.emit_to_user(
                followee_id,
                ServerEvent.NEW_FOLLOWER.value,
                UserSummary.model_validate(actor).model_dump(mode="json"),
            )
        except Exception:
            logger.exception("Failed to push new-follower from %s to %s", actor.id, followee_id)
        return ToggleResult(active=True, notification=notification)

    # --- Read side ------------------------------------------------------------------
    @staticmethod
    def _exists(db: Session, model: type[Any], **values: Any) -> bool:
        criteria = [getattr(model, column) == value for column, value in values.items()]
        return bool(db.scalar(select(exists().where(*criteria))))

    def is_liked(self, db: Session, user_id: str, target: ContentTarget) -> bool:
        return self._exists(db, Like, user_id=user_id, **{f"{target.kind}_id": target.content_id})

    def is_bookmarked(self, db: Session, user_id: str, target: ContentTarget) -> bool:
        return self._exists(
            db, Bookmark, user_id=user_id, **{f"{target.kind}_id": target.content_id}
        )

    def is_following(self, db: Session, follower_id: str, following_id: str) -> bool:
        return self._exists(db, Follow, follower_id=follower_id, following_id=following_id)

    def _saved_items(
        self,
        db: Session,
        model: type[Like] | type[Bookmark],
        user_id: str,
        content_type: SavedContentType,
        page: int,
        limit: int,
    ) -> tuple[list[SavedItem], int, int]:
        """Rows of ``model`` for ``user_id`` with their content, newest first.

        Rows pointing at private snippets or docs are skipped.
        """
        if db.get(User, user_id) is None:
            raise NotFound("User not found")
        page = max(page, 1)
        limit = min(max(limit, 1), 100)

        public_snippets = select(Snippet.id).where(Snippet.is_public.is_(True))
        public_docs = select(Doc.id).where(Doc.is_public.is_(True))
        criteria = [
            model.user_id == user_id,
            or_(model.snippet_id.is_(None), model.snippet_id.in_(public_snippets)),
            or_(model.doc_id.is_(None), model.doc_id.in_(public_docs)),
        ]
        if content_type.kind is not None:
            criteria.append(getattr(model, f"{content_type.kind}_id").is_not(None))

        total = db.scalar(select(func.count(model.id)).where(*criteria)) or 0
        rows = db.scalars(
            select(model)
            .where(*criteria)
            .order_by(model.created_at.desc(), model.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        loaded: dict[str, dict[str, Any]] = {}
        for kind, content_model in CONTENT_MODELS.items():
            ids = [getattr(row, f"{kind}_id") for row in rows if getattr(row, f"{kind}_id")]
            loaded[kind] = {}
            if ids:
                found = db.scalars(select(content_model).where(content_model.id.in_(ids)))
                loaded[kind] = {item.id: item for item in found}

        items = []
        for row in rows:
            kind = next(k for k in CONTENT_MODELS if getattr(row, f"{k}_id"))
            content = loaded[kind][getattr(row, f"{kind}_id")]
            items.append(
                SavedItem(
                    id=row.id,
                    created_at=row.created_at,
                    **{kind: SAVED_RESPONSES[kind].model_validate(content)},
                )
            )
        return items, total, math.ceil(total / limit)

    def get_user_likes(
        self,
        db: Session,
        user_id: str,
        content_type: SavedContentType = SavedContentType.ALL,
        page: int = 1,
        limit: int = 10,
    ) -> UserLikesPage:
        """Content ``user_id`` has liked, most recent like first."""
        likes, total, pages = self._saved_items(db, Like, user_id, content_type, page, limit)
        return UserLikesPage(likes=likes, total=total, pages=pages, current_page=max(page, 1))

    def get_user_bookmarks(
        self,
        db: Session,
        user_id: str,
        content_type: SavedContentType = SavedContentType.ALL,
        page: int = 1,
        limit: int = 10,
    ) -> UserBookmarksPage:
        """Content ``user_id`` has bookmarked, most recent bookmark first."""
        bookmarks, total, pages = self._saved_items(
            db, Bookmark, user_id, content_type, page, limit
        )
        return UserBookmarksPage(
            bookmarks=bookmarks, total=total, pages=pages, current_page=max(page, 1)
        )

    def _user_page(
        self,
        db: Session,
        user_id: str,
        *,
        join_on: Any,
        match_column: Any,
        page: int,
        limit: int,
    ) -> UserListPage:
        if db.get(User, user_id) is None:
            raise NotFound("User not found")
        page = max(page, 1)
        limit = min(max(limit, 1), 100)

        base = select(User).join(Follow, join_on).where(match_column == user_id)
        total = db.scalar(select(func.count()).select_from(base.subquery())) or 0
        users = db.scalars(
            base.order_by(Follow.created_at.desc()).offset((page - 1) * limit).limit(limit)
        ).all()
        return UserListPage(
            users=[UserProfile.model_validate(user) for user in users],
            total=total,
            pages=math.ceil(total / limit),
            current_page=page,
        )

    def get_followers(
        self, db: Session, user_id: str, page: int = 1, limit: int = 10
    ) -> UserListPage:
        """Users following ``user_id``, most recent follow first."""
        return self._user_page(
            db,
            user_id,
            join_on=Follow.follower_id == User.id,
            match_column=Follow.following_id,
            page=page,
            limit=limit,
        )

    def get_following(
        self, db: Session, user_id: str, page: int = 1, limit: int = 10
    ) -> UserListPage:
        """Users that ``user_id`` follows, most recent follow first."""
        return self._user_page(
            db,
            user_id,
            join_on=Follow.following_id == User.id,
            match_column=Follow.follower_id,
            page=page,
            limit=limit,
        )

    def get_suggested_users(self, db: Session, actor_id: str, limit: int = 5) -> list[SuggestedUser]:
        """Accounts worth following, most followed first, newest on ties.

        Excludes the actor, accounts already followed, blocked accounts and
        anyone on either side of a block with the actor.
        """
        followers_count = (
            select(func.count(Follow.id))
            .where(Follow.following_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        already_followed = select(Follow.following_id).where(Follow.follower_id == actor_id)
        blocked_either_way = select(Block.id).where(
            or_(
                and_(Block.blocker_id == actor_id, Block.blocked_id == User.id),
                and_(Block.blocked_id == actor_id, Block.blocker_id == User.id),
            )
        )

        rows = db.execute(
            select(User, followers_count.label("followers_count"))
            .where(
                User.id != actor_id,
                User.is_blocked.is_(False),
                User.id.not_in(already_followed),
                ~blocked_either_way.exists(),
            )
            .order_by(followers_count.desc(), User.created_at.desc())
            .limit(min(max(limit, 1), 50))
        ).all()

        return [
            SuggestedUser.model_validate(user).model_copy(update={"followers_count": count or 0})
            for user, count in rows
        ]
