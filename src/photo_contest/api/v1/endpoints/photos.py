# src/photo_contest/api/v1/endpoints/photos.py
"""Photo submission and gallery endpoints for the photo contest API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from photo_contest.schemas.auth import SuccessResponse
from photo_contest.schemas.photo import PhotoCreate, PhotoCreated, PhotoResponse, VoterResponse
from photo_contest.services import submissions
from photo_contest.services.submissions import PhotoEntry
from photo_contest.services.voting import VotingService

from ..dependencies import ConfigDep, FetcherDep, IsAdminDep, SessionDep, StorageDep

router = APIRouter(prefix="/photos", tags=["photos"])


def _to_response(entry: PhotoEntry) -> PhotoResponse:
    photo = entry.photo
    return PhotoResponse(
        id=photo.id,
        category_id=photo.category_id,
        player_name=photo.player_name,
        submitter_identity=photo.submitter_identity,
        image_reference=photo.image_reference,
        width=photo.width,
        height=photo.height,
        caption=photo.caption,
        created_at=photo.created_at,
        vote_count=entry.vote_count,
        has_voted=entry.has_voted,
    )


@router.get("/{category_id}", response_model=list[PhotoResponse])
async def list_photos(
    category_id: int,
    db: SessionDep,
    voter: str | None = Query(None, description="Identity used to fill in has_voted"),
) -> list[PhotoResponse]:
    """List a category's photos newest first with live vote counts."""
    return [_to_response(entry) for entry in submissions.list_photos(db, category_id, voter)]


@router.post("", response_model=PhotoCreated, status_code=status.HTTP_201_CREATED)
async def submit_photo(
    payload: PhotoCreate,
    db: SessionDep,
    config: ConfigDep,
    storage: StorageDep,
    fetcher: FetcherDep,
) -> PhotoCreated:
    """Submit a screenshot to a category of the active contest."""
    photo = await submissions.submit_photo(db, payload, config=config, storage=storage, fetcher=fetcher)
    return PhotoCreated(id=photo.id, image_reference=photo.image_reference)


@router.delete("/{photo_id}", response_model=SuccessResponse)
async def delete_photo(
    photo_id: int,
    db: SessionDep,
    storage: StorageDep,
    is_admin: IsAdminDep,
    requester: str | None = Query(None, description="Submitter identity of the caller"),
) -> SuccessResponse:
    """Delete a photo and its votes (submitter or admin only)."""
    await submissions.delete_photo(
        db,
        photo_id,
        requester_identity=requester,
        is_admin=is_admin,
        storage=storage,
    )
    return SuccessResponse()


@router.get("/{photo_id}/voters", response_model=list[VoterResponse])
async def list_voters(photo_id: int, db: SessionDep) -> list[VoterResponse]:
    """List who voted for a photo, oldest vote first."""
    return [
        VoterResponse(voter_display_name=vote.voter_display_name, created_at=vote.created_at)
        for vote in VotingService.list_voters(db, photo_id)
    ]
