"""Admin gate and sync trigger schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin password check."""

    password: str = Field(..., max_length=1024)


class LoginResponse(BaseModel):
    success: bool


class SyncResponse(BaseModel):
    """Summary of one sync run."""

    status: str
    job_run_id: Optional[int] = None
    synced: int = 0
    fetched: int = 0
    endpoints_failed: int = 0
    error: Optional[str] = None
