"""Contest and category Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import CategoryName, ContestName


class CategoryInput(BaseModel):
    """Category entry inside a contest create/update payload.

    ``id`` identifies an existing category to keep; entries without one are new.
    """

    id: int | None = None
    name: CategoryName
    description: str = Field("", max_length=500)
    emoji: str | None = Field(None, max_length=16)


class CategoryCreate(BaseModel):
    """Schema for adding a category to the active contest."""

    name: CategoryName
    description: str = Field("", max_length=500)
    emoji: str | None = Field(None, max_length=16)


class CategoryResponse(BaseModel):
    """Schema for category information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    contest_id: int
    name: str
    description: str
    emoji: str | None
    display_order: int


class ContestCreate(BaseModel):
    """Schema for launching a new contest."""

    name: ContestName
    categories: list[CategoryInput] = Field(..., min_length=1)
    rules: str | None = Field(None, description="Markdown rules replacing the current ones")
    submissions_close_at: datetime | None = None
    voting_ends_at: datetime | None = None


class ContestUpdate(BaseModel):
    """Schema for editing a contest.

    The category list is the complete desired set; schedule fields are only
    changed when present in the payload, so an explicit null clears them.
    """

    name: ContestName | None = None
    categories: list[CategoryInput] = Field(..., min_length=1)
    rules: str | None = None
    submissions_close_at: datetime | None = None
    voting_ends_at: datetime | None = None


class ContestArchive(BaseModel):
    """Schema for archiving the active contest."""

    next_name: ContestName | None = Field(
        None,
        description="Launch a replacement contest with default categories",
    )


class ContestResponse(BaseModel):
    """Schema for contest information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool
    created_at: datetime
    submissions_close_at: datetime | None
    voting_ends_at: datetime | None


class ContestDetail(ContestResponse):
    """Contest together with its ordered categories."""

    categories: list[CategoryResponse]


class ArchiveResponse(BaseModel):
    """Result of archiving the active contest."""

    success: bool = True
    archived_contest_id: int | None
    active_contest: ContestDetail | None
