"""Message request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Message about a report, addressed to the report owner."""

    model_config = ConfigDict(str_strip_whitespace=True)

    report_id: int = Field(ge=1)
    subject: str | None = Field(default=None, max_length=200)
    body: str = Field(min_length=10, max_length=1000)
    message_type: Literal["inquiry", "match_notification", "general", "system"] = "inquiry"
    priority: Literal["low", "normal", "high"] = "normal"


class MessageRead(BaseModel):
    """Serialized message."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: str
    recipient_id: str
    report_id: int
    subject: str
    body: str
    message_type: str
    priority: str
    read: bool
    read_at: datetime | None
    timestamp: datetime


class UnreadCount(BaseModel):
    """Unread inbox counter."""

    unread: int
