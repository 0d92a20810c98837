# src/photo_contest/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .categories import router as categories_router
from .contests import router as contests_router
from .photos import router as photos_router
from .rules import router as rules_router
from .system import router as system_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "categories_router",
    "contests_router",
    "photos_router",
    "rules_router",
    "system_router",
    "votes_router",
]
