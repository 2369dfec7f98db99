"""SQLAlchemy metadata registry import for Alembic."""

from app.models import Match, Message, Report
from app.models.base import Base

__all__ = ["Base", "Match", "Message", "Report"]
