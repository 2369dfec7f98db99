"""ORM models package exports."""

from app.models.match import Match
from app.models.message import Message
from app.models.report import Report

__all__ = [
    "Match",
    "Message",
    "Report",
]
