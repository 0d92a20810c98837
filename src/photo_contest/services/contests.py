"""Contest and category management.

Every multi-row change (launch, archive, edit) is staged on the session and
committed once, so readers never observe a half-applied contest.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from photo_contest.db.time import as_utc, utcnow
from photo_contest.models import Category, Contest, Photo
from photo_contest.models.contest import DEFAULT_CATEGORY_EMOJI
from photo_contest.schemas.contest import (
    CategoryCreate,
    CategoryInput,
    ContestCreate,
    ContestUpdate,
)
from photo_contest.services.errors import (
    ConflictError,
    DuplicateCategoryError,
    NoActiveContestError,
    NotFoundError,
    ValidationError,
)
from photo_contest.services.settings_store import RULES_MARKDOWN, VOTING_OPEN, set_setting

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Best Vehicle", "Show off your favorite ride"),
    ("Scenic Los Santos", "Beautiful landscapes and city views"),
    ("Action Shot", "Intense moments captured"),
)


def default_categories() -> list[Category]:
    """Build fresh, unsaved default categories."""
    return [
        Category(name=name, description=description, emoji=DEFAULT_CATEGORY_EMOJI, display_order=i)
        for i, (name, description) in enumerate(DEFAULT_CATEGORIES)
    ]


def get_active_contest(db: Session) -> Contest | None:
    """Return the single active contest, if any."""
    return db.query(Contest).filter(Contest.is_active.is_(True)).first()


def get_contest(db: Session, contest_id: int) -> Contest:
    """Return a contest by id or raise ``NotFoundError``."""
    contest = db.get(Contest, contest_id)
    if contest is None:
        raise NotFoundError(f"Contest {contest_id} not found")
    return contest


def list_contests(db: Session, is_active: bool | None = None) -> list[Contest]:
    """List contests newest first, optionally filtered by activity."""
    query = db.query(Contest)
    if is_active is not None:
        query = query.filter(Contest.is_active.is_(is_active))
    return query.order_by(Contest.created_at.desc(), Contest.id.desc()).all()


def list_categories(db: Session, contest_id: int | None = None) -> list[Category]:
    """List categories of a contest, defaulting to the active one."""
    if contest_id is None:
        active = get_active_contest(db)
        if active is None:
            return []
        contest_id = active.id
    return (
        db.query(Category)
        .filter(Category.contest_id == contest_id)
        .order_by(Category.display_order, Category.id)
        .all()
    )


def count_photos(db: Session, category_id: int) -> int:
    """Return how many photos were submitted to a category."""
    return db.query(func.count(Photo.id)).filter(Photo.category_id == category_id).scalar() or 0


def _ensure_unique_names(items: Iterable[CategoryInput]) -> None:
    seen: set[str] = set()
    for item in items:
        key = item.name.strip().casefold()
        if key in seen:
            raise ValidationError(f"Category name '{item.name}' is listed more than once")
        seen.add(key)


def _commit_or_conflict(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError(message) from err


def create_contest(db: Session, data: ContestCreate, *, now: datetime | None = None) -> Contest:
    """Launch a contest: deactivate the current one and insert the new one.

    Args:
        db: Database session
        data: Contest name, categories, optional rules and schedule
        now: Creation timestamp override

    Returns:
        The persisted, active contest

    Raises:
        ValidationError: If category names repeat
        ConflictError: If a concurrent launch won the single-active slot
    """
    _ensure_unique_names(data.categories)

    db.query(Contest).filter(Contest.is_active.is_(True)).update(
        {Contest.is_active: False},
        synchronize_session="fetch",
    )
    contest = Contest(
        name=data.name.strip(),
        is_active=True,
        created_at=now or utcnow(),
        submissions_close_at=as_utc(data.submissions_close_at),
        voting_ends_at=as_utc(data.voting_ends_at),
    )
    contest.categories = [
        Category(
            name=item.name.strip(),
            description=item.description,
            emoji=item.emoji or DEFAULT_CATEGORY_EMOJI,
            display_order=position,
        )
        for position, item in enumerate(data.categories)
    ]
    db.add(contest)
    if data.rules is not None:
        set_setting(db, RULES_MARKDOWN, data.rules)

    _commit_or_conflict(db, "Another contest was activated at the same time; please retry")
    db.refresh(contest)
    logger.info("Launched contest %s (%r) with %d categories", contest.id, contest.name, len(contest.categories))
    return contest


def archive_contest(
    db: Session,
    next_name: str | None = None,
    *,
    now: datetime | None = None,
) -> tuple[Contest | None, Contest | None]:
    """Archive the active contest, close voting and optionally launch a successor.

    Without ``next_name`` the system is left without an active
    contest.

    Returns:
        Tuple of (archived contest, replacement contest)

    Raises:
        NoActiveContestError: If nothing is active and no successor was named
    """
    next_name = next_name.strip() if next_name else None
    archived = get_active_contest(db)
    if archived is None and not next_name:
        raise NoActiveContestError("There is no active contest to archive")

    if archived is not None:
        archived.is_active = False
    set_setting(db, VOTING_OPEN, False)
    # The deactivation must reach the database before the successor row.
    db.flush()

    replacement = None
    if next_name:
        replacement = Contest(name=next_name, is_active=True, created_at=now or utcnow())
        replacement.categories = default_categories()
        db.add(replacement)

    _commit_or_conflict(db, "Another contest was activated at the same time; please retry")
    if replacement is not None:
        db.refresh(replacement)
    logger.info(
        "Archived contest %s; replacement %s",
        archived.id if archived else None,
        replacement.id if replacement else None,
    )
    return archived, replacement


def update_contest(db: Session, contest_id: int, data: ContestUpdate) -> Contest:
    """Edit a contest and reconcile its categories by id.

    Categories with an id are updated in place, categories without one are
    inserted, and existing categories missing from the payload are deleted.
    The payload order becomes the new display order.

    Raises:
        NotFoundError: If the contest does not exist
        ValidationError: On repeated names or ids from another contest
        ConflictError: If a removed category still holds photos
    """
    contest = get_contest(db, contest_id)
    _ensure_unique_names(data.categories)

    existing = {category.id: category for category in contest.categories}
    incoming_ids = [item.id for item in data.categories if item.id is not None]
    if len(incoming_ids) != len(set(incoming_ids)):
        raise ValidationError("A category id is listed more than once")
    unknown = set(incoming_ids) - existing.keys()
    if unknown:
        raise ValidationError(
            f"Categories {sorted(unknown)} do not belong to contest {contest.id}"
        )

    keep = set(incoming_ids)
    removed = [category for cid, category in existing.items() if cid not in keep]
    for category in removed:
        photo_count = count_photos(db, category.id)
        if photo_count:
            raise ConflictError(
                f"Category '{category.name}' has {photo_count} submission(s) and cannot be removed"
            )

    if data.name is not None:
        contest.name = data.name.strip()
    if "submissions_close_at" in data.model_fields_set:
        contest.submissions_close_at = as_utc(data.submissions_close_at)
    if "voting_ends_at" in data.model_fields_set:
        contest.voting_ends_at = as_utc(data.voting_ends_at)

    for category in removed:
        contest.categories.remove(category)
    # Park renamed categories on placeholders so swapped names never collide mid-flush.
    for item in data.categories:
        if item.id is not None and existing[item.id].name != item.name.strip():
            existing[item.id].name = f"__renaming_{item.id}"
    db.flush()

    for position, item in enumerate(data.categories):
        if item.id is not None:
            category = existing[item.id]
            category.name = item.name.strip()
            category.description = item.description
            category.emoji = item.emoji or DEFAULT_CATEGORY_EMOJI
            category.display_order = position
        else:
            contest.categories.append(
                Category(
                    name=item.name.strip(),
                    description=item.description,
                    emoji=item.emoji or DEFAULT_CATEGORY_EMOJI,
                    display_order=position,
                )
            )
    if data.rules is not None:
        set_setting(db, RULES_MARKDOWN, data.rules)

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise DuplicateCategoryError("Category names must be unique within a contest") from err
    db.refresh(contest)
    logger.info(
        "Updated contest %s: %d categories, %d removed",
        contest.id,
        len(contest.categories),
        len(removed),
    )
    return contest


def add_category(db: Session, data: CategoryCreate) -> Category:
    """Append a category to the active contest.

    Raises:
        NoActiveContestError: If no contest is active
        DuplicateCategoryError: If the name is already used in the contest
    """
    contest = get_active_contest(db)
    if contest is None:
        raise NoActiveContestError("No active contest")

    last_position = (
        db.query(func.max(Category.display_order))
        .filter(Category.contest_id == contest.id)
        .scalar()
    )
    category = Category(
        contest_id=contest.id,
        name=data.name.strip(),
        description=data.description,
        emoji=data.emoji or DEFAULT_CATEGORY_EMOJI,
        display_order=(last_position + 1) if last_position is not None else 0,
    )
    db.add(category)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise DuplicateCategoryError(f"Category '{category.name}' already exists") from err
    db.refresh(category)
    return category
