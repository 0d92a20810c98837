"""Create tables and seed the settings and first contest."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from photo_contest.db.session import SessionLocal, create_tables
from photo_contest.models import Contest
from photo_contest.services.contests import default_categories
from photo_contest.services.settings_store import seed_defaults

logger = logging.getLogger(__name__)

FIRST_CONTEST_NAME = "Monthly Contest"


def seed_first_contest(db: Session, name: str = FIRST_CONTEST_NAME) -> Contest | None:
    """Create an active contest with the default categories if none exists yet."""
    if db.query(Contest.id).first() is not None:
        return None
    contest = Contest(name=name, is_active=True)
    contest.categories = default_categories()
    db.add(contest)
    db.commit()
    db.refresh(contest)
    logger.info("Seeded contest %s (%r)", contest.id, contest.name)
    return contest


def init_db() -> None:
    """Initialize the database by creating all tables and default rows."""
    create_tables()
    with SessionLocal() as db:
        seed_defaults(db)
        seed_first_contest(db)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    print("Database initialized.")
