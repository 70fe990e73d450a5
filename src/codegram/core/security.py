"""JWT helpers shared by the HTTP and WebSocket entry points."""
from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt

from codegram.core.settings import settings
from codegram.db.time import utcnow


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Issue a signed bearer token whose subject is the user id."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_subject(token: str) -> str | None:
    """Return the token subject, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
