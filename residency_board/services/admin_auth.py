"""Admin gate: shared-secret check and rate-limited login.

Login attempts are counted per identifier. Callers cannot be told apart yet,
so every attempt uses the single "global" identifier; pass a real caller key
once one is available.
"""

from __future__ import annotations

import logging
import math
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from residency_board.config import get_settings
from residency_board.models.login_attempt import LoginAttempt

logger = logging.getLogger(__name__)

GLOBAL_IDENTIFIER = "global"


class AdminPasswordNotConfiguredError(RuntimeError):
    """ADMIN_PASSWORD is unset; no admin call can succeed."""

    pass


class InvalidAdminPasswordError(PermissionError):
    """Wrong or missing admin password."""

    pass


class TooManyLoginAttemptsError(Exception):
    """Login rate limit exceeded. retry_after is in seconds."""

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Too many login attempts. Try again in {retry_after} seconds.")


def _as_utc(value: datetime) -> datetime:
    """Stored timestamps come back naive (UTC)."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def validate_admin_password(password: str | None) -> None:
    """Raise unless password matches ADMIN_PASSWORD (constant-time compare)."""
    expected = get_settings().admin_password
    if not expected:
        raise AdminPasswordNotConfiguredError("ADMIN_PASSWORD environment variable is not set")
    if not password or not secrets.compare_digest(password.encode(), expected.encode()):
        raise InvalidAdminPasswordError("Invalid admin password")


def verify_login(
    db: Session,
    password: str,
    identifier: str = GLOBAL_IDENTIFIER,
    now: datetime | None = None,
) -> None:
    """Check the admin password under the login rate limit.

    Every attempt is recorded, including failures. A success clears the
    identifier's recent attempts and purges attempts older than the window.

    Raises TooManyLoginAttemptsError, AdminPasswordNotConfiguredError or
    InvalidAdminPasswordError.
    """
    settings = get_settings()
    now = now or datetime.now(UTC)
    window = timedelta(minutes=settings.login_window_minutes)
    window_start = now - window

    recent = (
        db.query(LoginAttempt)
        .filter(
            LoginAttempt.identifier == identifier,
            LoginAttempt.attempted_at > window_start,
        )
        .order_by(LoginAttempt.attempted_at.asc())
        .all()
    )
    if len(recent) >= settings.login_max_attempts:
        oldest = _as_utc(recent[0].attempted_at)
        retry_after = max(1, math.ceil((oldest + window - now).total_seconds()))
        logger.warning("Admin login rate limited: identifier=%s", identifier)
        raise TooManyLoginAttemptsError(retry_after)

    db.add(LoginAttempt(identifier=identifier, attempted_at=now))
    db.commit()

    try:
        validate_admin_password(password)
    except InvalidAdminPasswordError:
        logger.warning("Admin login failed: identifier=%s", identifier)
        raise

    for attempt in recent:
        db.delete(attempt)
    db.commit()
    cleanup_old_attempts(db, identifier, now=now)


def cleanup_old_attempts(
    db: Session, identifier: str = GLOBAL_IDENTIFIER, now: datetime | None = None
) -> int:
    """Delete attempts older than the window. Returns the number deleted."""
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(minutes=get_settings().login_window_minutes)
    deleted = (
        db.query(LoginAttempt)
        .filter(
            LoginAttempt.identifier == identifier,
            LoginAttempt.attempted_at < cutoff,
        )
        .delete(synchronize_session="fetch")
    )
    db.commit()
    return deleted
