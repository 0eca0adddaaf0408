"""Upsert residencies keyed by external_id, resolving each record's company."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from residency_board.ingestion.normalize import extract_company_name
from residency_board.schemas.residency import NormalizedResidency
from residency_board.services import repository
from residency_board.services.company_resolver import resolve_or_create_company

logger = logging.getLogger(__name__)

# Always written, even when empty
_REQUIRED_ATTRS = ("name", "residency_type", "residency_title", "job_title")


@dataclass
class UpsertResult:
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def synced(self) -> int:
        return self.inserted + self.updated


def _residency_fields(record: NormalizedResidency) -> dict:
    """Column values for a record. Absent optional fields are left out so a
    resync does not wipe operator edits the source does not carry."""
    data = record.model_dump(exclude={"external_id"}, exclude_none=True)
    data["residency_type"] = record.residency_type.value
    for attr in _REQUIRED_ATTRS:
        data.setdefault(attr, "")
    return data


def upsert_residency(
    db: Session, record: NormalizedResidency, synced_at: datetime
) -> bool:
    """Insert or patch one residency. Returns True if inserted, False if updated.

    Flushes but does not commit.
    """
    company, _ = resolve_or_create_company(db, extract_company_name(record.name))

    fields = _residency_fields(record)
    fields["company_id"] = company.id if company is not None else None
    fields["synced_at"] = synced_at

    existing = repository.find_residency_by_external_id(db, record.external_id)
    if existing is not None:
        repository.patch_residency(db, existing, fields)
        return False

    repository.insert_residency(db, {"external_id": record.external_id, **fields})
    return True


def upsert_residencies(
    db: Session,
    records: list[NormalizedResidency],
    synced_at: datetime | None = None,
) -> UpsertResult:
    """Upsert a batch. Each record is its own transaction.

    One record failing is logged and rolled back; the rest of the batch proceeds.
    Residencies missing from the batch are left untouched.
    """
    synced_at = synced_at or datetime.now(UTC)
    result = UpsertResult()

    for record in records:
        try:
            inserted = upsert_residency(db, record, synced_at)
            db.commit()
        except Exception as exc:
            db.rollback()
            result.failed += 1
            result.errors.append(f"{record.external_id}: {exc}")
            logger.exception("Upsert failed for residency %s", record.external_id)
            continue
        if inserted:
            result.inserted += 1
        else:
            result.updated += 1

    logger.info(
        "Upserted residencies: inserted=%d updated=%d failed=%d",
        result.inserted,
        result.updated,
        result.failed,
    )
    return result
