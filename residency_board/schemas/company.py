"""Company schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CompanyRead(BaseModel):
    """Schema for reading a company (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    image_id: Optional[str] = None
    image_url: Optional[str] = None
    website: Optional[str] = None
    aliases: list[str] = Field(default_factory=list)
    created_at: datetime


class CompanyWebsiteUpdate(BaseModel):
    """Operator edit of a company's website. Blank clears it."""

    website: str = Field("", max_length=2048)


class MergeRequest(BaseModel):
    """Merge source companies into target. The target keeps its name and slug."""

    target_id: int
    source_ids: list[int] = Field(..., min_length=1)


class MergeResponse(BaseModel):
    """Outcome of a merge. skipped_ids were already gone or equal to the target."""

    target_id: int
    merged_ids: list[int]
    skipped_ids: list[int]
    aliases: list[str]
