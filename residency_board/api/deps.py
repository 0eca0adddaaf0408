"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Header, HTTPException, status

from residency_board.db.session import get_db  # re-export
from residency_board.services.admin_auth import (
    AdminPasswordNotConfiguredError,
    InvalidAdminPasswordError,
    validate_admin_password,
)

__all__ = [
    "ADMIN_PASSWORD_HEADER",
    "get_db",
    "require_admin",
]

# Header carrying the shared admin secret on every gated call
ADMIN_PASSWORD_HEADER = "X-Admin-Password"


def require_admin(
    x_admin_password: str | None = Header(None, alias=ADMIN_PASSWORD_HEADER),
) -> None:
    """Dependency that requires the admin password on the request.

    Returns 401 for a wrong or missing password so the UI can re-prompt.
    Returns 500 when the server has no admin password configured.
    """
    try:
        validate_admin_password(x_admin_password)
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
