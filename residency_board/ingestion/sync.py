"""Sync job: fetch all endpoints, normalize, upsert (daily via cron, or manual).

No run-in-progress guard: two overlapping runs can both insert the same new
external_id. The unique constraint on residencies.external_id turns the loser's
insert into a logged per-record failure rather than a duplicate row.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from residency_board.ingestion.normalize import normalize_record
from residency_board.ingestion.source_client import MissingCredentialError, SourceClient
from residency_board.ingestion.upsert import upsert_residencies
from residency_board.models import JobRun
from residency_board.schemas.residency import NormalizedResidency

logger = logging.getLogger(__name__)

JOB_TYPE = "sync"


def _finish(db: Session, job: JobRun, status: str, error: str | None = None) -> None:
    job.finished_at = datetime.now(UTC)
    job.status = status
    job.error_message = error
    db.commit()


def run_sync(db: Session, client: SourceClient | None = None) -> dict:
    """Run one full sync and return its summary.

    Creates a JobRun record. A missing source token marks the run failed and
    re-raises MissingCredentialError; no request is made. Endpoint and record
    failures are absorbed and only reduce the synced count.

    Returns:
        dict with status, job_run_id, synced, fetched, endpoints_failed, error
    """
    job = JobRun(job_type=JOB_TYPE, status="running")
    db.add(job)
    db.commit()
    db.refresh(job)

    try:
        if client is None:
            client = SourceClient.from_settings()
    except (MissingCredentialError, ValueError) as exc:
        # Configuration errors: missing token or a malformed SOURCE_ENDPOINTS
        logger.error("Sync aborted: %s", exc)
        _finish(db, job, "failed", str(exc))
        raise

    try:
        fetched = client.fetch_all()

        normalized: list[NormalizedResidency] = []
        for raw in fetched.records:
            try:
                normalized.append(normalize_record(raw))
            except Exception:
                logger.exception("Normalize failed for record %s", raw.id)

        upserted = upsert_residencies(db, normalized)

        job.records_fetched = len(fetched.records)
        job.records_synced = upserted.synced
        job.endpoints_failed = fetched.endpoints_failed
        errors = upserted.errors
        _finish(db, job, "completed", "; ".join(errors[:10]) if errors else None)
        logger.info(
            "Synced %d residencies (%d fetched, %d endpoints failed)",
            upserted.synced,
            len(fetched.records),
            fetched.endpoints_failed,
        )
        return {
            "status": "completed",
            "job_run_id": job.id,
            "synced": upserted.synced,
            "fetched": len(fetched.records),
            "endpoints_failed": fetched.endpoints_failed,
            "error": "; ".join(errors) if errors else None,
        }

    except Exception as exc:
        logger.exception("Sync job failed")
        db.rollback()
        _finish(db, job, "failed", str(exc))
        return {
            "status": "failed",
            "job_run_id": job.id,
            "synced": 0,
            "fetched": 0,
            "endpoints_failed": 0,
            "error": str(exc),
        }
