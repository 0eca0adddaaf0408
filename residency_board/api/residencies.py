"""Public read API: residencies and companies."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from residency_board.api.deps import get_db
from residency_board.schemas.company import CompanyRead
from residency_board.schemas.residency import ResidencyRead, ResidencyType
from residency_board.services.catalog import get_residency, list_companies, list_residencies

router = APIRouter()


@router.get("/residencies", response_model=list[ResidencyRead])
def api_list_residencies(
    residency_type: ResidencyType | None = Query(None, description="Program code, e.g. R2"),
    db: Session = Depends(get_db),
) -> list[ResidencyRead]:
    """List residencies with their company, sorted by company name."""
    return list_residencies(db, residency_type.value if residency_type else None)


@router.get("/residencies/{residency_id}", response_model=ResidencyRead)
def api_get_residency(
    residency_id: int,
    db: Session = Depends(get_db),
) -> ResidencyRead:
    """Get a single residency by ID."""
    result = get_residency(db, residency_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Residency not found")
    return result


@router.get("/companies", response_model=list[CompanyRead])
def api_list_companies(db: Session = Depends(get_db)) -> list[CompanyRead]:
    """List companies sorted by name."""
    return list_companies(db)
