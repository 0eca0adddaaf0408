"""Pydantic schemas for API request/response validation."""

from residency_board.schemas.admin import LoginRequest, LoginResponse, SyncResponse
from residency_board.schemas.company import (
    CompanyRead,
    CompanyWebsiteUpdate,
    MergeRequest,
    MergeResponse,
)
from residency_board.schemas.residency import (
    NormalizedResidency,
    ResidencyDescriptionUpdate,
    ResidencyLocationUpdate,
    ResidencyRead,
    ResidencyType,
    SourceRecord,
)

__all__ = [
    "CompanyRead",
    "CompanyWebsiteUpdate",
    "LoginRequest",
    "LoginResponse",
    "MergeRequest",
    "MergeResponse",
    "NormalizedResidency",
    "ResidencyDescriptionUpdate",
    "ResidencyLocationUpdate",
    "ResidencyRead",
    "ResidencyType",
    "SourceRecord",
    "SyncResponse",
]
