"""Storage interface used by the ingestion and merge core.

Thin functions over a SQLAlchemy Session. Nothing here commits; the caller
owns the transaction boundary (one record per commit for upserts, one merge
per commit for merges).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy.orm import Session

from residency_board.models.company import Company
from residency_board.models.company_alias import CompanyAlias
from residency_board.models.residency import Residency


def find_company_by_slug(db: Session, slug: str) -> Company | None:
    """Exact match on the primary slug index."""
    return db.query(Company).filter(Company.slug == slug).first()


def find_company_by_alias(db: Session, slug: str) -> Company | None:
    """Company whose alias set contains slug.

    Two companies carrying the same alias should not happen after merges but is
    not prevented; the lowest company id wins.
    """
    return (
        db.query(Company)
        .join(CompanyAlias, CompanyAlias.company_id == Company.id)
        .filter(CompanyAlias.alias_slug == slug)
        .order_by(Company.id.asc())
        .first()
    )


def get_company(db: Session, company_id: int) -> Company | None:
    return db.get(Company, company_id)


def create_company(db: Session, name: str, slug: str) -> Company:
    """Insert a company and flush to obtain its id."""
    company = Company(name=name, slug=slug)
    db.add(company)
    db.flush()
    return company


def set_company_aliases(db: Session, company: Company, aliases: Iterable[str]) -> list[str]:
    """Replace the company's alias set. The company's own slug is never stored.

    Returns the stored aliases in insertion order.
    """
    wanted: list[str] = []
    for alias in aliases:
        if alias and alias != company.slug and alias not in wanted:
            wanted.append(alias)

    existing = {a.alias_slug: a for a in company.aliases}
    for slug, row in existing.items():
        if slug not in wanted:
            company.aliases.remove(row)
    for slug in wanted:
        if slug not in existing:
            company.aliases.append(CompanyAlias(alias_slug=slug))
    db.flush()
    return wanted


def delete_company(db: Session, company: Company) -> None:
    db.delete(company)
    db.flush()


def find_residency_by_external_id(db: Session, external_id: str) -> Residency | None:
    return db.query(Residency).filter(Residency.external_id == external_id).first()


def insert_residency(db: Session, fields: dict[str, Any]) -> Residency:
    residency = Residency(**fields)
    db.add(residency)
    db.flush()
    return residency


def patch_residency(db: Session, residency: Residency, fields: dict[str, Any]) -> Residency:
    for key, value in fields.items():
        setattr(residency, key, value)
    db.flush()
    return residency


def list_residencies_by_company(db: Session, company_id: int) -> list[Residency]:
    return (
        db.query(Residency)
        .filter(Residency.company_id == company_id)
        .order_by(Residency.id.asc())
        .all()
    )
