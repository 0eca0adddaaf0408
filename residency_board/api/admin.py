"""Admin API: login check, manual sync, company merges and metadata edits.

Every route except /login requires the shared admin password in the
X-Admin-Password header. Auth failures are 401; other failures return a
generic message.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from residency_board.api.deps import get_db, require_admin
from residency_board.ingestion.source_client import MissingCredentialError
from residency_board.ingestion.sync import run_sync
from residency_board.schemas.admin import LoginRequest, LoginResponse, SyncResponse
from residency_board.schemas.company import CompanyRead, CompanyWebsiteUpdate, MergeRequest, MergeResponse
from residency_board.schemas.residency import (
    ResidencyDescriptionUpdate,
    ResidencyLocationUpdate,
    ResidencyRead,
)
from residency_board.services.admin_auth import (
    AdminPasswordNotConfiguredError,
    InvalidAdminPasswordError,
    TooManyLoginAttemptsError,
    verify_login,
)
from residency_board.services.catalog import (
    update_company_image,
    update_company_website,
    update_residency_description,
    update_residency_location,
)
from residency_board.services.company_merge import (
    CompanyNotFoundError,
    MergeInProgressError,
    merge_companies,
)
from residency_board.services.media import InvalidImageError, save_image

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Login ────────────────────────────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
def api_login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginResponse:
    """Check the admin password. Limited to a few attempts per window."""
    try:
        verify_login(db, body.password)
    except TooManyLoginAttemptsError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(exc),
            headers={"Retry-After": str(exc.retry_after)},
        ) from None
    except AdminPasswordNotConfiguredError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin password is not configured",
        ) from None
    except InvalidAdminPasswordError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin password",
        ) from None
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(success=True)


# ── Sync ─────────────────────────────────────────────────────────────


@router.post("/sync", response_model=SyncResponse)
def api_trigger_sync(
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> SyncResponse:
    """Run a full residency sync now."""
    try:
        result = run_sync(db)
    except (MissingCredentialError, ValueError):
        logger.exception("Manual sync aborted")
        raise HTTPException(status_code=500, detail="Sync failed") from None
    if result["status"] != "completed":
        raise HTTPException(status_code=500, detail="Sync failed")
    return SyncResponse(**result)


# ── Companies ────────────────────────────────────────────────────────


@router.post("/companies/merge", response_model=MergeResponse)
def api_merge_companies(
    body: MergeRequest,
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> MergeResponse:
    """Merge source companies into the target. Replaying a merge is a no-op."""
    try:
        result = merge_companies(db, body.target_id, body.source_ids)
    except CompanyNotFoundError:
        raise HTTPException(status_code=404, detail="Target company not found") from None
    except MergeInProgressError:
        raise HTTPException(status_code=409, detail="Another merge is in progress") from None
    except Exception:
        logger.exception("Merge failed: target=%s sources=%s", body.target_id, body.source_ids)
        raise HTTPException(status_code=500, detail="Merge failed") from None
    return MergeResponse(
        target_id=result.target_id,
        merged_ids=result.merged_ids,
        skipped_ids=result.skipped_ids,
        aliases=result.aliases,
    )


@router.post("/companies/{company_id}/image", response_model=CompanyRead)
async def api_upload_company_image(
    company_id: int,
    request: Request,
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> CompanyRead:
    """Upload a company logo (multipart field ``file``, image/* only)."""
    form = await request.form()
    file = form.get("file")
    if file is None or isinstance(file, str):
        raise HTTPException(status_code=422, detail="No file field in upload.")
    try:
        content = await file.read()
    finally:
        await file.close()

    try:
        image_id = save_image(content, file.content_type, file.filename)
    except InvalidImageError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None

    result = update_company_image(db, company_id, image_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return result


@router.put("/companies/{company_id}/website", response_model=CompanyRead)
def api_update_company_website(
    company_id: int,
    body: CompanyWebsiteUpdate,
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> CompanyRead:
    """Set or clear a company's website."""
    result = update_company_website(db, company_id, body.website)
    if result is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return result


# ── Residencies ──────────────────────────────────────────────────────


@router.put("/residencies/{residency_id}/description", response_model=ResidencyRead)
def api_update_residency_description(
    residency_id: int,
    body: ResidencyDescriptionUpdate,
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> ResidencyRead:
    """Replace a residency's description."""
    result = update_residency_description(db, residency_id, body.description)
    if result is None:
        raise HTTPException(status_code=404, detail="Residency not found")
    return result


@router.put("/residencies/{residency_id}/location", response_model=ResidencyRead)
def api_update_residency_location(
    residency_id: int,
    body: ResidencyLocationUpdate,
    db: Session = Depends(get_db),
    _auth: None = Depends(require_admin),
) -> ResidencyRead:
    """Set a residency's location. Blank clears it."""
    result = update_residency_location(db, residency_id, body.location)
    if result is None:
        raise HTTPException(status_code=404, detail="Residency not found")
    return result
