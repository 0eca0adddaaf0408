"""Normalize SourceRecord to NormalizedResidency; extract company display names."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

from residency_board.schemas.residency import NormalizedResidency, SourceRecord

logger = logging.getLogger(__name__)

# Source field name -> residency attribute
REQUIRED_FIELDS: dict[str, str] = {
    "Name": "name",
    "Residency Title": "residency_title",
    "Job Title": "job_title",
}
OPTIONAL_FIELDS: dict[str, str] = {
    "Job Description": "description",
    "Email Application Address": "email_address",
    "Monthly Salary": "monthly_salary",
    "Accommodation Support": "accommodation_support",
    "Location": "location",
}

# Trailing counters like "Acme Corp 03", "Acme_2", "Acme-12"
_TRAILING_NUMBER = re.compile(r"[\s_-]*\d+$")


def extract_company_name(name: str) -> str:
    """Company display name from the composite ``Name`` field.

    "R2 | Acme Corp 03" -> "Acme Corp". Without a pipe the whole (stripped)
    name is the company name.
    """
    if not name:
        return ""
    parts = name.split("|")
    if len(parts) > 1:
        return _TRAILING_NUMBER.sub("", parts[1].strip()).strip()
    return name.strip()


def _text(value: Any) -> str | None:
    """Coerce a field value to stripped text. Blank or missing -> None."""
    if value is None:
        return None
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v is not None)
    s = str(value).strip()
    return s or None


def _parse_created(value: str | None) -> datetime | None:
    """Parse ISO-8601 createdTime ("2025-01-15T10:00:00.000Z")."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable createdTime: %s", value)
        return None


def normalize_record(record: SourceRecord) -> NormalizedResidency:
    """Map a raw source record onto the canonical residency shape.

    Missing optional fields become None; missing required text fields become "".
    """
    fields = record.fields
    data: dict[str, Any] = {
        "external_id": record.id,
        "residency_type": record.program_type,
        "created_at": _parse_created(record.created_time),
    }
    for source_key, attr in REQUIRED_FIELDS.items():
        data[attr] = _text(fields.get(source_key)) or ""
    for source_key, attr in OPTIONAL_FIELDS.items():
        data[attr] = _text(fields.get(source_key))
    return NormalizedResidency(**data)
