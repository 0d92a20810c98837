"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from photo_contest.db.session import get_db
from photo_contest.models import AdminSession
from photo_contest.services import admin_sessions
from photo_contest.services.errors import UnauthorizedError
from photo_contest.services.settings_store import ContestConfig, load_config
from photo_contest.services.storage import (
    ImageStorage,
    RemoteImageFetcher,
    get_image_fetcher,
    get_image_storage,
)

# Missing credentials are reported as UnauthorizedError rather than FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_bearer_token(credentials: CredentialsDep) -> str | None:
    """Return the raw bearer token, if one was sent."""
    return credentials.credentials if credentials else None


TokenDep = Annotated[str | None, Depends(get_bearer_token)]


def get_admin_session(token: TokenDep, db: SessionDep) -> AdminSession:
    """Require a live admin session.

    Raises:
        UnauthorizedError: If the token is missing, unknown or expired
    """
    return admin_sessions.require_auth(db, token)


def is_admin_request(token: TokenDep, db: SessionDep) -> bool:
    """Report whether the request carries a valid admin token, without failing."""
    if not token:
        return False
    try:
        admin_sessions.require_auth(db, token)
    except UnauthorizedError:
        return False
    return True


def get_contest_config(db: SessionDep) -> ContestConfig:
    """Load the contest switches once for the current request."""
    return load_config(db)


AdminDep = Annotated[AdminSession, Depends(get_admin_session)]
IsAdminDep = Annotated[bool, Depends(is_admin_request)]
ConfigDep = Annotated[ContestConfig, Depends(get_contest_config)]
StorageDep = Annotated[ImageStorage, Depends(get_image_storage)]
FetcherDep = Annotated[RemoteImageFetcher, Depends(get_image_fetcher)]
