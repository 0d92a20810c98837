# src/photo_contest/api/v1/endpoints/categories.py
"""Category endpoints for the photo contest API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from photo_contest.schemas.contest import CategoryCreate, CategoryResponse
from photo_contest.services import contests as contest_service

from ..dependencies import AdminDep, SessionDep

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    db: SessionDep,
    contest_id: int | None = Query(None, alias="contestId"),
) -> list[CategoryResponse]:
    """List categories of a contest in display order (the active one by default)."""
    return [
        CategoryResponse.model_validate(category)
        for category in contest_service.list_categories(db, contest_id)
    ]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, db: SessionDep, _: AdminDep) -> CategoryResponse:
    """Append a category to the active contest."""
    return CategoryResponse.model_validate(contest_service.add_category(db, payload))
