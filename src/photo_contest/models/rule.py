"""SQLAlchemy model for admin-managed contest rules."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from photo_contest.db.session import Base


class Rule(Base):
    """Free-standing rule entry shown on the rules page."""

    __tablename__ = "rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Stored as "category" to match the public payload; not a contest category.
    category_tag: Mapped[str] = mapped_column("category", String(60), nullable=False, default="General")
    importance: Mapped[str] = mapped_column(String(20), nullable=False, default="Normal")
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
