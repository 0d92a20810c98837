# src/photo_contest/models/vote.py
"""Models capturing votes on photos."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from photo_contest.db.session import Base
from photo_contest.db.time import utcnow

if TYPE_CHECKING:
    from .photo import Photo


class Vote(Base):
    """One voter's endorsement of one photo."""

    __tablename__ = "votes"
    __table_args__ = (
        # A voter may hold at most one vote per photo.
        UniqueConstraint("photo_id", "voter_identity", name="uq_votes_photo_voter"),
        Index("ix_votes_photo_id", "photo_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    photo_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("photos.id", ondelete="CASCADE"),
        nullable=False,
    )
    voter_identity: Mapped[str] = mapped_column(String(120), nullable=False)
    voter_display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    photo: Mapped[Photo] = relationship("Photo", back_populates="votes")
