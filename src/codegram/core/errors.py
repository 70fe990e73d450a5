"""Domain errors raised by the service layer.

Services never build HTTP responses themselves. They raise one of these
exceptions and the handlers registered in :mod:`codegram.main` translate it
into a status-coded JSON body.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(ServiceError):
    """Bad input such as a malformed content target or a self-follow."""

    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDenied(ServiceError):
    """The actor may not mutate a resource they neither own nor administer."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ServiceError):
    """The referenced resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    """The write collided with existing state."""

    status_code = status.HTTP_409_CONFLICT


class Gone(ServiceError):
    """The resource existed but is no longer actionable (an expired bug)."""

    status_code = status.HTTP_410_GONE
