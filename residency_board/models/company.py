"""Company model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residency_board.db.session import Base


class Company(Base):
    """Company offering residencies. Identity is the slug derived from its name."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    image_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    aliases: Mapped[list["CompanyAlias"]] = relationship(
        "CompanyAlias",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="CompanyAlias.id",
    )
    residencies: Mapped[list["Residency"]] = relationship(
        "Residency", back_populates="company", passive_deletes=True
    )

    @property
    def alias_slugs(self) -> list[str]:
        """Slugs of companies merged into this one."""
        return [a.alias_slug for a in self.aliases]
