"""Business logic services for the photo contest application."""

from .errors import ContestError
from .settings_store import ContestConfig
from .voting import VotingService

__all__ = [
    "ContestConfig",
    "ContestError",
    "VotingService",
]
