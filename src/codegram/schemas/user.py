"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    """Public profile fields inlined wherever a user is referenced."""

    id: str
    username: str
    name: str | None = None
    avatar: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserProfile(UserSummary):
    """Summary plus the short bio shown in follower lists."""

    bio: str | None = None


class SuggestedUser(UserProfile):
    """Follow suggestion with the popularity signal used to rank it."""

    followers_count: int = 0


class UserListPage(BaseModel):
    """Paginated list of users."""

    users: list[UserProfile]
    total: int
    pages: int
    current_page: int
