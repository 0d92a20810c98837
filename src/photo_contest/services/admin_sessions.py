"""Admin login, token checks and logout."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from photo_contest.core.settings import settings
from photo_contest.db.time import as_utc, utcnow
from photo_contest.models import AdminSession
from photo_contest.services.errors import UnauthorizedError

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32

__all__ = [
    "login",
    "logout",
    "require_auth",
]


def login(
    db: Session,
    password: str,
    *,
    admin_password: str | None = None,
    now: datetime | None = None,
) -> str:
    """Exchange the admin password for a new opaque bearer token.

    There is no lockout or rate limiting on failed attempts.

    Raises:
        UnauthorizedError: If the password does not match
    """
    expected = admin_password if admin_password is not None else settings.admin_password
    if not secrets.compare_digest(password.encode(), expected.encode()):
        logger.warning("Rejected admin login attempt")
        raise UnauthorizedError("Invalid password")

    token = secrets.token_urlsafe(TOKEN_BYTES)
    db.add(AdminSession(token=token, created_at=now or utcnow()))
    db.commit()
    logger.info("Admin session opened")
    return token


def require_auth(
    db: Session,
    token: str | None,
    *,
    ttl_seconds: int | None = None,
    now: datetime | None = None,
) -> AdminSession:
    """Return the session for ``token`` or raise ``UnauthorizedError``.

    Sessions never expire unless a TTL is configured; an expired session is
    removed when it is next presented.
    """
    if not token:
        raise UnauthorizedError("Authentication required")

    session = db.get(AdminSession, token)
    if session is None:
        raise UnauthorizedError("Invalid or expired session")

    ttl = ttl_seconds if ttl_seconds is not None else settings.admin_session_ttl_seconds
    if ttl is not None:
        now = now or utcnow()
        if now - as_utc(session.created_at) >= timedelta(seconds=ttl):
            db.delete(session)
            db.commit()
            raise UnauthorizedError("Invalid or expired session")
    return session


def logout(db: Session, token: str | None) -> None:
    """Delete the session for ``token``; unknown tokens are ignored."""
    if not token:
        return
    deleted = db.query(AdminSession).filter(AdminSession.token == token).delete()
    db.commit()
    if deleted:
        logger.info("Admin session closed")
