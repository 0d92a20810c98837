# src/photo_contest/models/contest.py
"""SQLAlchemy models for contests and their categories."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photo_contest.db.session import Base
from photo_contest.db.time import utcnow

if TYPE_CHECKING:
    from .photo import Photo

DEFAULT_CATEGORY_EMOJI = "✨"


class Contest(Base):
    """A time-bounded competition owning a set of categories.

    Contests are never physically deleted; archiving flips ``is_active``.
    """

    __tablename__ = "contests"
    __table_args__ = (
        # At most one row may carry is_active = true.
        Index(
            "uq_contests_single_active",
            "is_active",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active IS TRUE"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    submissions_close_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    voting_ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    categories: Mapped[list[Category]] = relationship(
        "Category",
        back_populates="contest",
        cascade="all, delete-orphan",
        order_by="Category.display_order",
    )


class Category(Base):
    """Themed bucket within a contest that submissions belong to."""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("contest_id", "name", name="uq_categories_contest_name"),
        Index("ix_categories_contest_id", "contest_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contest_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contests.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    emoji: Mapped[str | None] = mapped_column(String(16), nullable=True, default=DEFAULT_CATEGORY_EMOJI)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    contest: Mapped[Contest] = relationship("Contest", back_populates="categories")
    photos: Mapped[list[Photo]] = relationship("Photo", back_populates="category")
