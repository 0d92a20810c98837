"""System-level bookkeeping models."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from photo_contest.db.session import Base
from photo_contest.db.time import utcnow


class Setting(Base):
    """Key-value configuration row; values are JSON encoded."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)


class AdminSession(Base):
    """Opaque bearer token issued after a successful admin login."""

    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
