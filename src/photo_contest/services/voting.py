"""Voting services for photo contests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from photo_contest.core.settings import settings
from photo_contest.db.time import as_utc, utcnow
from photo_contest.models import Photo, Vote
from photo_contest.services.contests import get_active_contest
from photo_contest.services.errors import (
    AlreadyVotedError,
    NotFoundError,
    ValidationError,
    VotingClosedError,
)
from photo_contest.services.settings_store import ContestConfig

logger = logging.getLogger(__name__)

VOTE_MODE_PERMANENT = "permanent"
VOTE_MODE_TOGGLE = "toggle"


@dataclass(frozen=True)
class VoteOutcome:
    """State of a (photo, voter) pair after a vote request."""

    photo_id: int
    voted: bool
    vote_count: int


class VotingService:
    """Service handling vote casting and vote reads.

    ``vote_count`` is always the number of ``votes`` rows for a photo, so the
    counter cannot drift from the rows it counts.
    """

    @staticmethod
    def count_votes(db: Session, photo_id: int) -> int:
        """Return the live number of votes on a photo."""
        return db.query(func.count(Vote.id)).filter(Vote.photo_id == photo_id).scalar() or 0

    @staticmethod
    def cast_vote(
        db: Session,
        photo_id: int,
        voter_identity: str,
        voter_display_name: str | None = None,
        *,
        config: ContestConfig,
        mode: str | None = None,
        now: datetime | None = None,
    ) -> VoteOutcome:
        """Record a vote, or withdraw it again when running in toggle mode.

        Args:
            db: Database session
            photo_id: Photo being voted on
            voter_identity: Stable voter handle
            voter_display_name: Name shown in voter lists
            config: Contest switches loaded for this request
            mode: ``permanent`` or ``toggle``; defaults to the configured mode
            now: Clock override

        Returns:
            Whether the voter now holds a vote, and the photo's vote total

        Raises:
            VotingClosedError: Voting is off, past its end, or the photo's contest was archived
            NotFoundError: The photo does not exist
            AlreadyVotedError: A repeat vote in permanent mode
        """
        identity = voter_identity.strip()
        if not identity:
            raise ValidationError("voter_identity must not be blank")
        mode = mode or settings.vote_mode
        now = now or utcnow()
        contest = get_active_contest(db)

        if not config.voting_open:
            raise VotingClosedError("Voting is closed")
        ends_at = as_utc(contest.voting_ends_at) if contest else None
        if ends_at is not None and now >= ends_at:
            raise VotingClosedError(f"Voting ended at {ends_at.isoformat()}")

        photo = db.get(Photo, photo_id)
        if photo is None:
            raise NotFoundError(f"Photo {photo_id} not found")
        if contest is None or photo.category.contest_id != contest.id:
            raise VotingClosedError("Voting for this contest has ended")

        existing = (
            db.query(Vote)
            .filter(Vote.photo_id == photo_id, Vote.voter_identity == identity)
            .first()
        )
        if existing is not None:
            if mode != VOTE_MODE_TOGGLE:
                raise AlreadyVotedError("You have already voted for this photo")
            db.delete(existing)
            db.commit()
            logger.info("Vote by %s on photo %s withdrawn", identity, photo_id)
            return VoteOutcome(photo_id, False, VotingService.count_votes(db, photo_id))

        db.add(
            Vote(
                photo_id=photo_id,
                voter_identity=identity,
                voter_display_name=(voter_display_name or "").strip() or identity,
                created_at=now,
            )
        )
        try:
            db.commit()
        except IntegrityError as err:
            db.rollback()
            raise AlreadyVotedError("You have already voted for this photo") from err
        return VoteOutcome(photo_id, True, VotingService.count_votes(db, photo_id))

    @staticmethod
    def list_voters(db: Session, photo_id: int) -> list[Vote]:
        """Return a photo's votes oldest first.

        Raises:
            NotFoundError: If the photo does not exist
        """
        if db.get(Photo, photo_id) is None:
            raise NotFoundError(f"Photo {photo_id} not found")
        return (
            db.query(Vote)
            .filter(Vote.photo_id == photo_id)
            .order_by(Vote.created_at, Vote.id)
            .all()
        )
