"""Contest switches, theme, results and health endpoints."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Query
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from photo_contest.core.settings import settings
from photo_contest.schemas.system import (
    ContestStatus,
    SubmissionsToggled,
    Theme,
    ThemeResponse,
    ToggleRequest,
    VotingToggled,
)
from photo_contest.services import contests as contest_service
from photo_contest.services.errors import NoActiveContestError
from photo_contest.services.reporting import (
    AnalyticsReport,
    CategoryWinner,
    build_analytics,
    load_snapshot,
    winner_per_category,
)
from photo_contest.services.settings_store import (
    CURRENT_THEME,
    SUBMISSIONS_OPEN,
    VOTING_OPEN,
    set_setting,
)

from ..dependencies import AdminDep, ConfigDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/status", response_model=ContestStatus)
async def get_status(config: ConfigDep) -> ContestStatus:
    """Return whether voting and submissions are currently open."""
    return ContestStatus(voting_open=config.voting_open, submissions_open=config.submissions_open)


@router.post("/admin/toggle-voting", response_model=VotingToggled)
async def toggle_voting(
    db: SessionDep,
    config: ConfigDep,
    _: AdminDep,
    payload: ToggleRequest | None = None,
) -> VotingToggled:
    """Open or close voting; without a value the current state is flipped."""
    value = payload.open if payload and payload.open is not None else not config.voting_open
    set_setting(db, VOTING_OPEN, value)
    db.commit()
    logger.info("Voting %s", "opened" if value else "closed")
    return VotingToggled(voting_open=value)


@router.post("/admin/toggle-submissions", response_model=SubmissionsToggled)
async def toggle_submissions(
    db: SessionDep,
    config: ConfigDep,
    _: AdminDep,
    payload: ToggleRequest | None = None,
) -> SubmissionsToggled:
    """Open or close submissions; without a value the current state is flipped."""
    value = payload.open if payload and payload.open is not None else not config.submissions_open
    set_setting(db, SUBMISSIONS_OPEN, value)
    db.commit()
    logger.info("Submissions %s", "opened" if value else "closed")
    return SubmissionsToggled(submissions_open=value)


@router.get("/theme", response_model=ThemeResponse)
async def get_theme(config: ConfigDep) -> ThemeResponse:
    theme = Theme.model_validate(config.current_theme) if config.current_theme else None
    return ThemeResponse(theme=theme)


@router.post("/admin/theme", response_model=ThemeResponse)
async def set_theme(theme: Theme, db: SessionDep, _: AdminDep) -> ThemeResponse:
    """Store the site theme."""
    set_setting(db, CURRENT_THEME, theme.model_dump())
    db.commit()
    logger.info("Theme updated")
    return ThemeResponse(theme=theme)


@router.get("/winners", response_model=list[CategoryWinner])
async def get_winners(
    db: SessionDep,
    contest_id: int | None = Query(None, alias="contestId"),
) -> list[CategoryWinner]:
    """Return the leading photo of each category (active contest by default).

    Categories without photos are listed with a null winner.
    """
    contest = (
        contest_service.get_contest(db, contest_id)
        if contest_id is not None
        else contest_service.get_active_contest(db)
    )
    if contest is None:
        return []
    snapshot = load_snapshot(db, contest)
    return winner_per_category(snapshot.categories, snapshot.photos)


@router.get("/admin/analytics", response_model=AnalyticsReport)
async def get_analytics(
    db: SessionDep,
    _: AdminDep,
    contest_id: int | None = Query(None, alias="contestId"),
) -> AnalyticsReport:
    """Submission and vote statistics for the admin dashboard.

    Raises:
        NoActiveContestError: If no contest is given and none is active
    """
    if contest_id is not None:
        contest = contest_service.get_contest(db, contest_id)
    else:
        contest = contest_service.get_active_contest(db)
        if contest is None:
            raise NoActiveContestError("No active contest")
    return build_analytics(load_snapshot(db, contest))


@router.get("/system/health")
async def get_system_health(db: SessionDep) -> dict[str, object]:
    """Health check including database connectivity.

    Args:
        db: Database session

    Returns:
        Dictionary with overall status, component health and version info
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", exc_info=True)
        db_status = f"unhealthy: {e}"

    return {
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "timestamp": int(time.time()),
        "components": {"database": db_status},
        "version": settings.app_version,
    }
