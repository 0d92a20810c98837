"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import LoginRequest, LoginResponse, SuccessResponse
from .contest import (
    ArchiveResponse,
    CategoryCreate,
    CategoryResponse,
    ContestArchive,
    ContestCreate,
    ContestDetail,
    ContestResponse,
    ContestUpdate,
)
from .photo import PhotoCreate, PhotoCreated, PhotoResponse, VoterResponse
from .rule import RuleCreate, RuleResponse, RulesMarkdown, RuleUpdate
from .system import ContestStatus, Theme, ThemeResponse, ToggleRequest
from .vote import VoteCreate, VoteResult

__all__ = [
    "LoginRequest", "LoginResponse", "SuccessResponse",
    "ArchiveResponse", "CategoryCreate", "CategoryResponse",
    "ContestArchive", "ContestCreate", "ContestDetail", "ContestResponse", "ContestUpdate",
    "PhotoCreate", "PhotoCreated", "PhotoResponse", "VoterResponse",
    "RuleCreate", "RuleResponse", "RulesMarkdown", "RuleUpdate",
    "ContestStatus", "Theme", "ThemeResponse", "ToggleRequest",
    "VoteCreate", "VoteResult",
]
