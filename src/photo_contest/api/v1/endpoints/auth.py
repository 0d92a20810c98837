# src/photo_contest/api/v1/endpoints/auth.py
"""Admin authentication endpoints for the photo contest API."""

from __future__ import annotations

from fastapi import APIRouter

from photo_contest.schemas.auth import LoginRequest, LoginResponse, SuccessResponse
from photo_contest.services import admin_sessions

from ..dependencies import SessionDep, TokenDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: SessionDep) -> LoginResponse:
    """Exchange the admin password for a bearer token.

    Args:
        payload: Login request carrying the admin password
        db: Database session

    Returns:
        Newly issued session token
    """
    return LoginResponse(token=admin_sessions.login(db, payload.password))


@router.post("/logout", response_model=SuccessResponse)
async def logout(token: TokenDep, db: SessionDep) -> SuccessResponse:
    """End the caller's session. Succeeds even for unknown tokens."""
    admin_sessions.logout(db, token)
    return SuccessResponse()
