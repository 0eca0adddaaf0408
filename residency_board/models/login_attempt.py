"""LoginAttempt model for the admin login rate limit."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from residency_board.db.session import Base


class LoginAttempt(Base):
    """One admin password attempt. identifier is "global" until callers are identifiable."""

    __tablename__ = "login_attempts"
    __table_args__ = (Index("ix_login_attempts_identifier_time", "identifier", "attempted_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False)
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
