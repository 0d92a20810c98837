"""Rule-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Importance = Literal["Normal", "High", "Critical"]


class RuleBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    category: str = Field(default="General", max_length=60)
    importance: Importance = "Normal"
    display_order: int = 0


class RuleCreate(RuleBase):
    """Schema for adding a rule."""


class RuleUpdate(BaseModel):
    """Schema for editing a rule; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    category: str | None = Field(None, max_length=60)
    importance: Importance | None = None
    display_order: int | None = None


class RuleResponse(BaseModel):
    """Schema for rule information returned by the API."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    content: str
    category: str = Field(validation_alias="category_tag")
    importance: str
    display_order: int


class RulesMarkdown(BaseModel):
    content: str = ""
