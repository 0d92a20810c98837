"""Photo submission, listing and deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from photo_contest.core.settings import Settings, settings
from photo_contest.db.time import as_utc, utcnow
from photo_contest.models import Category, Photo, Vote
from photo_contest.schemas.photo import PhotoCreate
from photo_contest.services.contests import get_active_contest
from photo_contest.services.errors import (
    DuplicateSubmissionError,
    InvalidCategoryError,
    NotAuthorizedError,
    NotFoundError,
    SubmissionsClosedError,
    UpstreamError,
    ValidationError,
)
from photo_contest.services.imaging import (
    DecodedImage,
    decode_data_url,
    ensure_min_resolution,
    inspect_image,
)
from photo_contest.services.settings_store import ContestConfig
from photo_contest.services.storage import ImageStorage, RemoteImageFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionPolicy:
    """Deployment choices that shape what a valid submission is."""

    one_per_user: bool = True
    scope: str = "contest"
    min_width: int = 1920
    min_height: int = 1080
    max_bytes: int = 10 * 1024 * 1024

    @classmethod
    def from_settings(cls, config: Settings = settings) -> SubmissionPolicy:
        return cls(
            one_per_user=config.one_submission_per_user,
            scope=config.submission_scope,
            min_width=config.min_image_width,
            min_height=config.min_image_height,
            max_bytes=config.max_image_bytes,
        )

    def scope_key(self, contest_id: int) -> str | None:
        """Return the value stored in ``photos.uniqueness_scope``.

        NULL never collides in a unique index, so it disables the limit.
        """
        if not self.one_per_user:
            return None
        if self.scope == "global":
            return "global"
        return f"contest:{contest_id}"


@dataclass(frozen=True)
class PhotoEntry:
    """A photo with its live vote total."""

    photo: Photo
    vote_count: int
    has_voted: bool | None = None


def _duplicate_message(policy: SubmissionPolicy) -> str:
    if policy.scope == "global":
        return "You have already submitted a photo. Limit is 1 per player."
    return "You have already submitted a photo to this contest. Limit is 1 per player."


async def _discard_upload(storage: ImageStorage, reference: str) -> None:
    try:
        await storage.delete(reference)
    except (UpstreamError, OSError):
        logger.warning("Could not remove orphaned upload %s", reference, exc_info=True)


async def _load_image(
    data: PhotoCreate,
    policy: SubmissionPolicy,
    fetcher: RemoteImageFetcher | None,
) -> DecodedImage:
    if data.image_data:
        return inspect_image(decode_data_url(data.image_data, max_bytes=policy.max_bytes))
    if fetcher is None:
        raise ValidationError("Linked images are not accepted here; send image_data")
    return inspect_image(await fetcher.fetch(str(data.image_url), max_bytes=policy.max_bytes))


async def submit_photo(
    db: Session,
    data: PhotoCreate,
    *,
    config: ContestConfig,
    storage: ImageStorage,
    fetcher: RemoteImageFetcher | None = None,
    policy: SubmissionPolicy | None = None,
    now: datetime | None = None,
) -> Photo:
    """Validate and persist a submission.

    Preconditions are checked in order and the first failure wins: window
    open, category in the active contest, no earlier submission in scope,
    minimum resolution. Linked images are downloaded and measured like
    embedded ones. The image is uploaded only after all of them pass, and an
    upload whose row cannot be stored is removed again.

    Raises:
        SubmissionsClosedError: Submissions switched off or past the close time
        InvalidCategoryError: Category missing or not in the active contest
        DuplicateSubmissionError: Submitter already has a photo in scope
        ImageTooSmallError: Image below the minimum resolution
        InvalidImageError: Undecodable, unsupported or unreachable image
        UploadFailedError: Image storage failed; no row is written
    """
    identity = data.submitter_identity.strip()
    player_name = data.player_name.strip()
    if not identity or not player_name:
        raise ValidationError("submitter_identity and player_name must not be blank")

    policy = policy or SubmissionPolicy.from_settings()
    now = now or utcnow()
    contest = get_active_contest(db)

    if not config.submissions_open:
        raise SubmissionsClosedError("Submissions are closed")
    close_at = as_utc(contest.submissions_close_at) if contest else None
    if close_at is not None and now >= close_at:
        raise SubmissionsClosedError(f"Submissions closed at {close_at.isoformat()}")

    category = db.get(Category, data.category_id)
    if contest is None or category is None or category.contest_id != contest.id:
        raise InvalidCategoryError(f"Category {data.category_id} is not part of the active contest")

    scope = policy.scope_key(contest.id)
    if scope is not None:
        existing = (
            db.query(Photo.id)
            .filter(Photo.submitter_identity == identity, Photo.uniqueness_scope == scope)
            .first()
        )
        if existing is not None:
            raise DuplicateSubmissionError(_duplicate_message(policy))

    image = await _load_image(data, policy, fetcher)
    ensure_min_resolution(image.width, image.height, min_width=policy.min_width, min_height=policy.min_height)

    reference = await storage.upload(image)

    photo = Photo(
        category_id=category.id,
        player_name=player_name,
        submitter_identity=identity,
        image_reference=reference,
        width=image.width,
        height=image.height,
        caption=data.caption,
        uniqueness_scope=scope,
        created_at=now,
    )
    db.add(photo)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        await _discard_upload(storage, reference)
        raise DuplicateSubmissionError(_duplicate_message(policy)) from err
    except SQLAlchemyError:
        db.rollback()
        await _discard_upload(storage, reference)
        raise

    db.refresh(photo)
    logger.info("Stored photo %s by %s in category %s", photo.id, identity, category.id)
    return photo


def get_photo(db: Session, photo_id: int) -> Photo:
    """Return a photo by id or raise ``NotFoundError``."""
    photo = db.get(Photo, photo_id)
    if photo is None:
        raise NotFoundError(f"Photo {photo_id} not found")
    return photo


def list_photos(db: Session, category_id: int, voter_identity: str | None = None) -> list[PhotoEntry]:
    """List a category's photos newest first with aggregated vote counts."""
    vote_count = func.count(Vote.id).label("vote_count")
    rows = (
        db.query(Photo, vote_count)
        .outerjoin(Vote, Vote.photo_id == Photo.id)
        .filter(Photo.category_id == category_id)
        .group_by(Photo.id)
        .order_by(Photo.created_at.desc(), Photo.id.desc())
        .all()
    )

    voted: set[int] | None = None
    if voter_identity:
        photo_ids = [photo.id for photo, _ in rows]
        voted = {
            photo_id
            for (photo_id,) in db.query(Vote.photo_id).filter(
                Vote.voter_identity == voter_identity.strip(),
                Vote.photo_id.in_(photo_ids),
            )
        }

    return [
        PhotoEntry(
            photo=photo,
            vote_count=int(count or 0),
            has_voted=(photo.id in voted) if voted is not None else None,
        )
        for photo, count in rows
    ]


async def delete_photo(
    db: Session,
    photo_id: int,
    *,
    requester_identity: str | None,
    is_admin: bool,
    storage: ImageStorage,
) -> None:
    """Delete a photo and its votes; only its submitter or an admin may.

    Raises:
        NotFoundError: If the photo does not exist
        NotAuthorizedError: If the requester is neither owner nor admin
    """
    photo = get_photo(db, photo_id)
    requester = (requester_identity or "").strip()
    if not is_admin and (not requester or requester != photo.submitter_identity):
        raise NotAuthorizedError("Only the submitter or an admin can delete this photo")

    reference = photo.image_reference
    db.delete(photo)
    db.commit()
    logger.info("Deleted photo %s (admin=%s)", photo_id, is_admin)
    await _discard_upload(storage, reference)
