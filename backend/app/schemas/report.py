"""Report request/response schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


ReportType = Literal["lost", "found"]
ReportStatus = Literal["active", "resolved", "expired", "deleted"]
ReportPriority = Literal["low", "medium", "high", "urgent"]


class ReportCreate(BaseModel):
    """Lost/found phone submission payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    type: ReportType
    brand: str = Field(min_length=1, max_length=50)
    model: str | None = Field(default=None, max_length=100)
    color: str = Field(min_length=1, max_length=30)
    location: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=10, max_length=1000)
    date_lost_found: datetime
    contact_email: str | None = Field(
        default=None,
        max_length=255,
        pattern=r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
    )
    contact_phone: str | None = Field(default=None, pattern=r"^[+]?[\d\s\-()]{7,20}$")
    image_url: str | None = Field(default=None, pattern=r"(?i)^https?://.+\.(jpg|jpeg|png|gif|webp)$")
    priority: ReportPriority = "medium"

    @field_validator("model", "contact_email", "contact_phone", "image_url", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("contact_email")
    @classmethod
    def lowercase_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None

    @field_validator("date_lost_found")
    @classmethod
    def not_in_future(cls, value: datetime) -> datetime:
        aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        if aware > datetime.now(timezone.utc):
            raise ValueError("Date cannot be in the future")
        return aware


class ReportStatusUpdate(BaseModel):
    """Owner-driven status change."""

    status: ReportStatus


class ReportRead(BaseModel):
    """Serialized report."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    type: str
    brand: str
    model: str | None
    color: str
    location: str
    description: str
    date_lost_found: datetime
    contact_email: str | None
    contact_phone: str | None
    image_url: str | None
    status: str
    priority: str
    view_count: int
    is_verified: bool
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ReportSubmissionResult(BaseModel):
    """Outcome of a report submission including automatic matching."""

    report_id: int
    matches: int
    message: str


class ReportStats(BaseModel):
    """Aggregate report and match counters."""

    total_reports: int
    active_reports: int
    lost_reports: int
    found_reports: int
    resolved_reports: int
    total_matches: int
    confirmed_matches: int
