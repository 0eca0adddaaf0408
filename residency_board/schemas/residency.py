"""Residency schemas: raw source records, normalized records, API payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from residency_board.schemas.company import CompanyRead


class ResidencyType(str, Enum):
    """Residency program codes. One source endpoint per code."""

    r1 = "R1"
    r1_r2 = "R1+R2"
    r2 = "R2"
    r3 = "R3"
    r4 = "R4"


# ── Ingestion ───────────────────────────────────────────────────────────


class SourceRecord(BaseModel):
    """One record as returned by a source endpoint, tagged with its program type.

    ``fields`` is the loosely-structured upstream field map; the normalizer
    maps it onto NormalizedResidency.
    """

    program_type: ResidencyType
    id: str = Field(..., min_length=1, max_length=255)
    fields: dict[str, Any] = Field(default_factory=dict)
    created_time: Optional[str] = None


class NormalizedResidency(BaseModel):
    """Canonical residency shape consumed by the upsert engine."""

    external_id: str = Field(..., min_length=1, max_length=255)
    name: str = ""
    residency_type: ResidencyType
    residency_title: str = ""
    job_title: str = ""
    description: Optional[str] = None
    email_address: Optional[str] = None
    monthly_salary: Optional[str] = None
    accommodation_support: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


# ── API ─────────────────────────────────────────────────────────────────


class ResidencyRead(BaseModel):
    """Schema for reading a residency (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    name: str
    residency_type: str
    residency_title: str
    job_title: str
    description: Optional[str] = None
    email_address: Optional[str] = None
    monthly_salary: Optional[str] = None
    accommodation_support: Optional[str] = None
    location: Optional[str] = None
    company_id: Optional[int] = None
    company: Optional[CompanyRead] = None
    created_at: Optional[datetime] = None
    synced_at: datetime


class ResidencyDescriptionUpdate(BaseModel):
    """Operator edit of a residency's long-form description."""

    description: str


class ResidencyLocationUpdate(BaseModel):
    """Operator edit of a residency's location. Blank clears it."""

    location: str = Field("", max_length=512)
