"""Company resolver: slug derivation and look-up-or-create with alias fallback."""

from __future__ import annotations

import logging
import re
import unicodedata

from sqlalchemy.orm import Session

from residency_board.models.company import Company
from residency_board.services import repository

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# companies.slug column width
SLUG_MAX_LENGTH = 255


def slugify(name: str) -> str:
    """URL-safe slug for a company name.

    - NFKD-normalize and drop anything non-ASCII ("Über" -> "uber")
    - Lowercase
    - Runs of non-alphanumerics -> single hyphen
    - Strip leading/trailing hyphens
    - Cap at SLUG_MAX_LENGTH, without a trailing hyphen

    Returns "" when nothing alphanumeric remains.
    """
    if not name:
        return ""
    ascii_name = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    slug = _NON_ALNUM.sub("-", ascii_name.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def resolve_company(db: Session, slug: str) -> Company | None:
    """Existing company for slug: primary slug first, then alias sets."""
    company = repository.find_company_by_slug(db, slug)
    if company is not None:
        return company
    return repository.find_company_by_alias(db, slug)


def resolve_or_create_company(db: Session, name: str) -> tuple[Company | None, bool]:
    """Resolve a display name to a company, creating one if nothing matches.

    Resolution order:
    1. Exact match on Company.slug
    2. Company whose aliases contain the slug (merged-away companies)
    3. New company with this name and slug

    Returns (company, created). A name with an empty slug does not resolve:
    (None, False) and no company is created.
    """
    display_name = (name or "").strip()
    slug = slugify(display_name)
    if not slug:
        return None, False

    existing = resolve_company(db, slug)
    if existing is not None:
        return existing, False

    company = repository.create_company(db, display_name[:255], slug)
    logger.info("Created company %s (slug=%s)", company.id, slug)
    return company, True
