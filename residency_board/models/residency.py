"""Residency (job posting) model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residency_board.db.session import Base


class Residency(Base):
    """Residency posting keyed by the upstream record id (external_id)."""

    __tablename__ = "residencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    residency_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    residency_title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    job_title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    monthly_salary: Mapped[str | None] = mapped_column(String(255), nullable=True)
    accommodation_support: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(512), nullable=True)
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    synced_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    company: Mapped["Company | None"] = relationship("Company", back_populates="residencies")
