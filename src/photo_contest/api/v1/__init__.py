# src/photo_contest/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    categories_router,
    contests_router,
    photos_router,
    rules_router,
    system_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "categories_router",
    "contests_router",
    "photos_router",
    "rules_router",
    "system_router",
    "votes_router",
]
