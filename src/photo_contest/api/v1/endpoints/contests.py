# src/photo_contest/api/v1/endpoints/contests.py
"""Contest lifecycle endpoints for the photo contest API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from photo_contest.schemas.contest import (
    ArchiveResponse,
    ContestArchive,
    ContestCreate,
    ContestDetail,
    ContestResponse,
    ContestUpdate,
)
from photo_contest.services import contests as contest_service
from photo_contest.services.reporting import ContestView, build_contest_view, load_snapshot

from ..dependencies import AdminDep, SessionDep

router = APIRouter(tags=["contests"])


@router.get("/contests", response_model=list[ContestResponse])
async def list_contests(
    db: SessionDep,
    is_active: bool | None = Query(None, description="Only active (true) or archived (false)"),
) -> list[ContestResponse]:
    """List contests newest first."""
    return [ContestResponse.model_validate(c) for c in contest_service.list_contests(db, is_active)]


@router.get("/contests/{contest_id}", response_model=ContestDetail)
async def get_contest(contest_id: int, db: SessionDep) -> ContestDetail:
    return ContestDetail.model_validate(contest_service.get_contest(db, contest_id))


@router.get("/contest/active", response_model=ContestDetail | None)
async def get_active_contest(db: SessionDep) -> ContestDetail | None:
    """Return the active contest with its categories, or null between contests."""
    contest = contest_service.get_active_contest(db)
    return ContestDetail.model_validate(contest) if contest else None


@router.get("/contest/active/view", response_model=ContestView | None)
async def get_active_contest_view(db: SessionDep) -> ContestView | None:
    """Return ranked photos, winners and the leaderboard of the active contest.

    The view is recomputed from the full current state on every call.
    """
    contest = contest_service.get_active_contest(db)
    if contest is None:
        return None
    return build_contest_view(load_snapshot(db, contest))


@router.post(
    "/admin/contests",
    response_model=ContestDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_contest(payload: ContestCreate, db: SessionDep, _: AdminDep) -> ContestDetail:
    """Launch a contest, deactivating the current one."""
    return ContestDetail.model_validate(contest_service.create_contest(db, payload))


@router.put("/admin/contests/{contest_id}", response_model=ContestDetail)
async def update_contest(
    contest_id: int,
    payload: ContestUpdate,
    db: SessionDep,
    _: AdminDep,
) -> ContestDetail:
    """Edit a contest's name, schedule and category list."""
    return ContestDetail.model_validate(contest_service.update_contest(db, contest_id, payload))


@router.post("/admin/contest/archive", response_model=ArchiveResponse)
async def archive_contest(
    db: SessionDep,
    _: AdminDep,
    payload: ContestArchive | None = None,
) -> ArchiveResponse:
    """Archive the active contest and optionally start the next one."""
    archived, replacement = contest_service.archive_contest(db, payload.next_name if payload else None)
    return ArchiveResponse(
        archived_contest_id=archived.id if archived else None,
        active_contest=ContestDetail.model_validate(replacement) if replacement else None,
    )
