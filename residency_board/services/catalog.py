"""Residency and company read side, plus operator edits."""

from __future__ import annotations

from sqlalchemy.orm import Session, selectinload

from residency_board.models.company import Company
from residency_board.models.residency import Residency
from residency_board.schemas.company import CompanyRead
from residency_board.schemas.residency import ResidencyRead

MEDIA_URL_PREFIX = "/media"


# ── Field mapping helpers ────────────────────────────────────────────


def image_url(image_id: str | None) -> str | None:
    """Public URL for a stored logo."""
    return f"{MEDIA_URL_PREFIX}/{image_id}" if image_id else None


def _company_to_read(company: Company) -> CompanyRead:
    return CompanyRead(
        id=company.id,
        name=company.name,
        slug=company.slug,
        image_id=company.image_id,
        image_url=image_url(company.image_id),
        website=company.website,
        aliases=company.alias_slugs,
        created_at=company.created_at,
    )


def _residency_to_read(residency: Residency) -> ResidencyRead:
    return ResidencyRead(
        id=residency.id,
        external_id=residency.external_id,
        name=residency.name,
        residency_type=residency.residency_type,
        residency_title=residency.residency_title,
        job_title=residency.job_title,
        description=residency.description,
        email_address=residency.email_address,
        monthly_salary=residency.monthly_salary,
        accommodation_support=residency.accommodation_support,
        location=residency.location,
        company_id=residency.company_id,
        company=_company_to_read(residency.company) if residency.company else None,
        created_at=residency.created_at,
        synced_at=residency.synced_at,
    )


def _sort_key(residency: Residency) -> str:
    """Company name when resolved, else the raw composite name."""
    if residency.company is not None:
        return residency.company.name.casefold()
    return (residency.name or "").casefold()


# ── Queries ──────────────────────────────────────────────────────────


def list_residencies(db: Session, residency_type: str | None = None) -> list[ResidencyRead]:
    """All residencies with their company, sorted by company name."""
    query = db.query(Residency).options(
        selectinload(Residency.company).selectinload(Company.aliases)
    )
    if residency_type:
        query = query.filter(Residency.residency_type == residency_type)
    rows = sorted(query.all(), key=_sort_key)
    return [_residency_to_read(r) for r in rows]


def get_residency(db: Session, residency_id: int) -> ResidencyRead | None:
    residency = db.get(Residency, residency_id)
    if residency is None:
        return None
    return _residency_to_read(residency)


def list_companies(db: Session) -> list[CompanyRead]:
    """All companies sorted by name (case-insensitive)."""
    rows = db.query(Company).options(selectinload(Company.aliases)).all()
    rows.sort(key=lambda c: c.name.casefold())
    return [_company_to_read(c) for c in rows]


# ── Operator edits ───────────────────────────────────────────────────


def update_company_image(db: Session, company_id: int, image_id: str) -> CompanyRead | None:
    """Point the company at a stored logo. Returns None if the company is missing."""
    company = db.get(Company, company_id)
    if company is None:
        return None
    company.image_id = image_id
    db.commit()
    db.refresh(company)
    return _company_to_read(company)


def update_company_website(db: Session, company_id: int, website: str) -> CompanyRead | None:
    company = db.get(Company, company_id)
    if company is None:
        return None
    company.website = website.strip() or None
    db.commit()
    db.refresh(company)
    return _company_to_read(company)


def update_residency_description(
    db: Session, residency_id: int, description: str
) -> ResidencyRead | None:
    residency = db.get(Residency, residency_id)
    if residency is None:
        return None
    residency.description = description
    db.commit()
    db.refresh(residency)
    return _residency_to_read(residency)


def update_residency_location(
    db: Session, residency_id: int, location: str
) -> ResidencyRead | None:
    """Set the location; blank clears it."""
    residency = db.get(Residency, residency_id)
    if residency is None:
        return None
    residency.location = location.strip() or None
    db.commit()
    db.refresh(residency)
    return _residency_to_read(residency)
