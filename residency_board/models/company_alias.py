"""CompanyAlias model: slugs of companies absorbed by a merge."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residency_board.db.session import Base


class CompanyAlias(Base):
    """Former slug that still resolves to the surviving company."""

    __tablename__ = "company_aliases"
    __table_args__ = (
        UniqueConstraint("company_id", "alias_slug", name="uq_company_aliases_company_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    alias_slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    company: Mapped["Company"] = relationship("Company", back_populates="aliases")
