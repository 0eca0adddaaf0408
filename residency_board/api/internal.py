"""Internal job endpoints for cron/scripts.

These endpoints are secured with a static token (X-Internal-Token header),
NOT the admin password.  They are meant for automated triggers only.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from residency_board.config import get_settings
from residency_board.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


# ── Token dependency ────────────────────────────────────────────────


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison to prevent timing attacks.
    Raises 403 if the token is empty or does not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/run_sync")
def run_sync_endpoint(
    db: Session = Depends(get_db),
    _token: None = Depends(_require_internal_token),
):
    """Trigger a full residency sync (scheduled daily at 21:00 UTC).

    Returns the JobRun summary with the synced count.
    """
    from residency_board.ingestion.sync import run_sync

    try:
        return run_sync(db)
    except Exception as exc:
        logger.exception("Internal sync failed")
        return {"status": "failed", "error": str(exc)}
