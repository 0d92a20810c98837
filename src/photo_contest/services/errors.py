"""Domain errors raised by contest services.

Every service failure is a ``ContestError`` carrying a taxonomy ``kind``, an
actionable message and the HTTP status the API boundary should answer with.
"""

from __future__ import annotations

from fastapi import status


class ContestError(Exception):
    """Base class for all contest domain failures."""

    kind = "ContestError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ContestError):
    """Missing or malformed input."""

    kind = "ValidationError"


class AuthError(ContestError):
    """Missing, invalid or expired credentials."""

    kind = "AuthError"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ContestError):
    """Caller is known but not allowed to perform the action."""

    kind = "ForbiddenError"
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ContestError):
    """Uniqueness or state conflict (duplicates, no active contest)."""

    kind = "ConflictError"


class WindowClosedError(ContestError):
    """Submissions or voting are closed."""

    kind = "WindowClosedError"


class NotFoundError(ContestError):
    """A referenced contest, category or photo does not exist."""

    kind = "NotFoundError"
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(ContestError):
    """An external collaborator (image storage) failed."""

    kind = "UpstreamError"
    status_code = status.HTTP_502_BAD_GATEWAY


class SubmissionsClosedError(WindowClosedError):
    pass


class VotingClosedError(WindowClosedError):
    pass


class DuplicateSubmissionError(ConflictError):
    pass


class AlreadyVotedError(ConflictError):
    pass


class NoActiveContestError(ConflictError):
    pass


class DuplicateCategoryError(ConflictError):
    pass


class InvalidCategoryError(ValidationError):
    pass


class ImageTooSmallError(ValidationError):
    pass


class InvalidImageError(ValidationError):
    pass


class UploadFailedError(UpstreamError):
    pass


class NotAuthorizedError(ForbiddenError):
    pass


class UnauthorizedError(AuthError):
    pass
