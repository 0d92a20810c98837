# src/photo_contest/api/v1/endpoints/votes.py
"""Vote-related endpoints for the photo contest API."""

from fastapi import APIRouter

from photo_contest.schemas.vote import VoteCreate, VoteResult
from photo_contest.services.voting import VotingService

from ..dependencies import ConfigDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("", response_model=VoteResult)
async def cast_vote(vote_data: VoteCreate, db: SessionDep, config: ConfigDep) -> VoteResult:
    """Cast a vote on a photo.

    Args:
        vote_data: Photo id and voter identity
        db: Database session
        config: Contest switches for this request

    Returns:
        Whether the caller now holds a vote and the photo's live total
    """
    outcome = VotingService.cast_vote(
        db,
        vote_data.photo_id,
        vote_data.voter_identity,
        vote_data.voter_display_name,
        config=config,
    )
    return VoteResult(voted=outcome.voted, vote_count=outcome.vote_count)
