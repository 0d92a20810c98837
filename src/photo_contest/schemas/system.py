"""Schemas for contest switches, theme and health."""

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR = r"^#[0-9a-fA-F]{3,8}$"


class ContestStatus(BaseModel):
    """Public open/closed state of the contest windows."""

    model_config = ConfigDict(populate_by_name=True)

    voting_open: bool = Field(alias="votingOpen")
    submissions_open: bool = Field(alias="submissionsOpen")


class ToggleRequest(BaseModel):
    """Switch a window; omitting ``open`` flips the current state."""

    open: bool | None = None


class VotingToggled(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    voting_open: bool = Field(alias="votingOpen")


class SubmissionsToggled(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    submissions_open: bool = Field(alias="submissionsOpen")


class ThemeColors(BaseModel):
    background: str = Field(..., pattern=HEX_COLOR)
    text: str = Field(..., pattern=HEX_COLOR)
    primary: str = Field(..., pattern=HEX_COLOR)
    secondary: str = Field(..., pattern=HEX_COLOR)
    card: str = Field(..., pattern=HEX_COLOR)
    accent: str = Field(..., pattern=HEX_COLOR)


class Theme(BaseModel):
    """Site theme stored in the ``current_theme`` setting."""

    colors: ThemeColors
    font: str = Field("Inter", min_length=1, max_length=80)


class ThemeResponse(BaseModel):
    theme: Theme | None = None
