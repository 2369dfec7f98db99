"""Lost/found phone report ORM model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TimestampMixin


class Report(Base, IdMixin, TimestampMixin):
    """A phone reported as lost or found."""

    __tablename__ = "reports"
    __table_args__ = (
        Index("ix_reports_type_status_created_at", "type", "status", "created_at"),
        Index("ix_reports_user_id_created_at", "user_id", "created_at"),
    )

    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    brand: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color: Mapped[str] = mapped_column(String(30), index=True, nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date_lost_found: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="active", index=True, nullable=False)
    priority: Mapped[str] = mapped_column(String(16), default="medium", nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, nullable=True)
