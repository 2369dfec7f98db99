"""Match response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.report import ReportRead


class MatchRead(BaseModel):
    """Serialized match with both sides of the pair."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    report_id: int
    matched_report_id: int
    similarity: float
    matched_by: str
    status: str
    confidence: str
    brand_match: bool
    color_match: bool
    location_match: bool
    model_match: bool
    date_range_match: bool
    notes: str | None
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime
    report: ReportRead
    matched_report: ReportRead
