# src/photo_contest/models/photo.py
"""SQLAlchemy models for submitted photos."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photo_contest.db.session import Base
from photo_contest.db.time import utcnow

if TYPE_CHECKING:
    from .contest import Category
    from .vote import Vote


class Photo(Base):
    """A single contest entry: an image reference plus submitter metadata.

    Vote totals are never stored here; they are aggregated from ``votes``
    whenever a photo is read.
    """

    __tablename__ = "photos"
    __table_args__ = (
        # uniqueness_scope is "global", "contest:<id>" or NULL (no limit), so the
        # one-submission policy is enforced by the database for either scope.
        UniqueConstraint(
            "submitter_identity",
            "uniqueness_scope",
            name="uq_photos_submitter_scope",
        ),
        Index("ix_photos_category_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
    )
    player_name: Mapped[str] = mapped_column(String(120), nullable=False)
    submitter_identity: Mapped[str] = mapped_column(String(120), nullable=False)
    image_reference: Mapped[str] = mapped_column(Text, nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    uniqueness_scope: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    category: Mapped[Category] = relationship("Category", back_populates="photos")
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="photo",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
