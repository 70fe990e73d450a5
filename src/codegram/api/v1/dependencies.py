"""Shared API dependencies for authentication, services and common parameters."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Query, status
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from codegram.core.errors import ValidationFailed
from codegram.core.security import decode_subject
from codegram.db.session import get_db, get_session_factory
from codegram.models import User
from codegram.realtime.fanout import FanoutBroadcaster
from codegram.realtime.gateway import RealtimeGateway
from codegram.schemas.common import ContentTarget
from codegram.schemas.interaction import SavedContentType
from codegram.services import (
    CommentService,
    ContentService,
    InteractionService,
    NotificationService,
)

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

# Factory for handlers that open their own short-lived sessions
SessionFactoryDep = Annotated[Callable[[], Session], Depends(get_session_factory)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is invalid, the user is unknown or blocked
    """
    user_id = decode_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if user.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is blocked",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_gateway(connection: HTTPConnection) -> RealtimeGateway:
    """Return the gateway created for this process at startup."""
    gateway = getattr(connection.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Realtime gateway is not running",
        )
    return gateway


GatewayDep = Annotated[RealtimeGateway, Depends(get_gateway)]


def get_notification_service(gateway: GatewayDep) -> NotificationService:
    return NotificationService(gateway)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_interaction_service(
    gateway: GatewayDep, notifications: NotificationServiceDep
) -> InteractionService:
    return InteractionService(gateway, notifications)


def get_comment_service(
    gateway: GatewayDep, notifications: NotificationServiceDep
) -> CommentService:
    return CommentService(gateway, notifications)


def get_content_service(
    gateway: GatewayDep, notifications: NotificationServiceDep
) -> ContentService:
    return ContentService(FanoutBroadcaster(gateway), notifications)


InteractionServiceDep = Annotated[InteractionService, Depends(get_interaction_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]


def content_target_query(
    snippet_id: Annotated[str | None, Query(max_length=36)] = None,
    doc_id: Annotated[str | None, Query(max_length=36)] = None,
    bug_id: Annotated[str | None, Query(max_length=36)] = None,
) -> ContentTarget:
    """Build a :class:`ContentTarget` from query parameters."""
    try:
        return ContentTarget(snippet_id=snippet_id, doc_id=doc_id, bug_id=bug_id)
    except ValidationError as err:
        raise ValidationFailed("Target must reference exactly one content type") from err


ContentTargetQuery = Annotated[ContentTarget, Depends(content_target_query)]


class Pagination:
    """``page`` / ``limit`` query parameters shared by list endpoints."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1)] = 1,
        limit: Annotated[int, Query(ge=1, le=100)] = 10,
    ) -> None:
        self.page = page
        self.limit = limit


PaginationDep = Annotated[Pagination, Depends(Pagination)]


UserIdPath = Annotated[str, Path(min_length=1, max_length=36)]

# ``type`` filter on the liked/bookmarked content listings
SavedTypeQuery = Annotated[SavedContentType, Query(alias="type")]
