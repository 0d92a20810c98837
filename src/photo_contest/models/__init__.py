# src/photo_contest/models/__init__.py
"""SQLAlchemy models for the photo contest application."""

from .contest import Category, Contest
from .photo import Photo
from .rule import Rule
from .system import AdminSession, Setting
from .vote import Vote

__all__ = [
    "Contest", "Category",
    "Photo",
    "Rule",
    "AdminSession", "Setting",
    "Vote",
]
