"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from .common import DisplayName, Identity


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    photo_id: int
    voter_identity: Identity
    voter_display_name: DisplayName | None = Field(
        None,
        description="Name shown in the voter list; defaults to the identity",
    )


class VoteResult(BaseModel):
    """Outcome of a vote request."""

    success: bool = True
    voted: bool
    vote_count: int
