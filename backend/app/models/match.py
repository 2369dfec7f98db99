"""Stored match between a lost and a found report."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, IdMixin, TimestampMixin
from app.models.report import Report


class Match(Base, IdMixin, TimestampMixin):
    """Scored report pair plus the auxiliary criteria recorded alongside it."""

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("report_id", "matched_report_id", name="uq_matches_report_pair"),
    )

    report_id: Mapped[int] = mapped_column(
        ForeignKey("reports.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    matched_report_id: Mapped[int] = mapped_column(
        ForeignKey("reports.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    similarity: Mapped[float] = mapped_column(Float, nullable=False)
    matched_by: Mapped[str] = mapped_column(String(16), default="auto", index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True, nullable=False)
    confidence: Mapped[str] = mapped_column(String(16), default="medium", nullable=False)
    brand_match: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    color_match: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    location_match: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    model_match: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    date_range_match: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, nullable=True)

    report: Mapped[Report] = relationship(foreign_keys=[report_id], lazy="joined")
    matched_report: Mapped[Report] = relationship(foreign_keys=[matched_report_id], lazy="joined")
