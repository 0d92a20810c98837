"""Photo submission Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl, model_validator

from .common import Identity


class PhotoCreate(BaseModel):
    """Schema for submitting a photo.

    Exactly one image source is accepted: ``image_data`` (a base64 data URL)
    or ``image_url`` (an http(s) link the server downloads). Either way the
    server measures the image itself and stores its own copy.
    """

    category_id: int
    player_name: Identity = Field(..., description="In-game character name")
    submitter_identity: Identity = Field(..., description="Stable submitter handle, e.g. a Discord name")
    image_data: str | None = Field(None, description="Base64 data URL of the screenshot")
    image_url: HttpUrl | None = Field(None, description="Link to a hosted screenshot")
    caption: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def _check_image_source(self) -> "PhotoCreate":
        if bool(self.image_data) == (self.image_url is not None):
            raise ValueError("Provide exactly one of image_data or image_url")
        return self


class PhotoResponse(BaseModel):
    """Schema for photo information returned by the API."""

    id: int
    category_id: int
    player_name: str
    submitter_identity: str
    image_reference: str
    width: int
    height: int
    caption: str | None
    created_at: datetime
    vote_count: int
    has_voted: bool | None = None


class PhotoCreated(BaseModel):
    id: int
    image_reference: str


class VoterResponse(BaseModel):
    """One entry of a photo's voter list."""

    voter_display_name: str
    created_at: datetime
