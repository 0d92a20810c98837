"""Admin authentication Pydantic schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Opaque bearer token for admin endpoints."""

    token: str


class SuccessResponse(BaseModel):
    success: bool = True
