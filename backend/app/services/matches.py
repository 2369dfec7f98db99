"""Stored match queries, participant access, and match decisions."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, aliased

from app.models.match import Match
from app.models.report import Report

logger = logging.getLogger(__name__)


class MatchPermissionError(Exception):
    """Raised when a user acts on a match or report they have no part in."""


class MatchStateError(Exception):
    """Raised when a match is not in a state that allows the decision."""


def not_expired(column: Any, now: datetime | None = None) -> Any:
    """Filter clause keeping rows with no expiry or an expiry still ahead."""

    return or_(column.is_(None), column > (now or datetime.now(timezone.utc)))


def list_matches_for_user(db: Session, user_id: str, status: str | None = "pending") -> list[Match]:
    """Return live matches touching any report of ``user_id``, best first."""

    own_report = aliased(Report)
    other_report = aliased(Report)
    stmt = (
        select(Match)
        .join(own_report, own_report.id == Match.report_id)
        .join(other_report, other_report.id == Match.matched_report_id)
        .where(
            or_(own_report.user_id == user_id, other_report.user_id == user_id),
            not_expired(Match.expires_at),
        )
    )
    if status is not None:
        stmt = stmt.where(Match.status == status)
    stmt = stmt.order_by(Match.similarity.desc(), Match.created_at.desc(), Match.id.desc())
    return list(db.scalars(stmt).unique().all())


def list_matches_for_report(db: Session, report_id: int, user_id: str) -> list[Match] | None:
    """Return live matches of one report; only its owner may list them."""

    report = db.get(Report, report_id)
    if report is None:
        return None
    if report.user_id != user_id:
        raise MatchPermissionError("Only the report owner can list its matches")
    stmt = (
        select(Match)
        .where(
            or_(Match.report_id == report_id, Match.matched_report_id == report_id),
            not_expired(Match.expires_at),
        )
        .order_by(Match.similarity.desc(), Match.id.desc())
    )
    return list(db.scalars(stmt).unique().all())


def get_match(db: Session, match_id: int, user_id: str) -> Match | None:
    """Return one match if ``user_id`` owns either of its reports."""

    match = db.get(Match, match_id)
    if match is None:
        return None
    _ensure_participant(match, user_id)
    return match


def confirm_match(db: Session, match_id: int, user_id: str) -> Match | None:
    """Confirm a pending match as the lost-phone owner.

    The reports stay active until the phone is handed back (see ``return_match``),
    but every other pending match on either report is expired.
    """

    match = _get_decidable_match(db, match_id, user_id)
    if match is None:
        return None
    match.status = "confirmed"
    retired = _expire_sibling_matches(db, match)
    db.commit()
    db.refresh(match)
    logger.info("matches.confirmed match_id=%s user_id=%s expired_siblings=%d", match_id, user_id, retired)
    return match


def reject_match(db: Session, match_id: int, user_id: str) -> Match | None:
    match = _get_decidable_match(db, match_id, user_id)
    if match is None:
        return None
    match.status = "rejected"
    db.commit()
    db.refresh(match)
    logger.info("matches.rejected match_id=%s user_id=%s", match_id, user_id)
    return match


def return_match(db: Session, match_id: int, user_id: str) -> Match | None:
    """Mark the phone as returned: confirm the match and resolve both reports.

    Either party may call this, on a pending or confirmed match.
    """

    match = db.get(Match, match_id)
    if match is None:
        return None
    _ensure_participant(match, user_id)
    if match.status not in {"pending", "confirmed"}:
        raise MatchStateError(f"Match is already {match.status}")
    if match.report.status == "resolved" and match.matched_report.status == "resolved":
        raise MatchStateError("Match is already returned")

    try:
        match.status = "confirmed"
        match.report.status = "resolved"
        match.matched_report.status = "resolved"
        retired = _expire_sibling_matches(db, match)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("matches.return_failed match_id=%s user_id=%s", match_id, user_id)
        raise
    db.refresh(match)
    logger.info("matches.returned match_id=%s user_id=%s expired_siblings=%d", match_id, user_id, retired)
    return match


def lost_side(match: Match) -> Report:
    """Return the lost report of the pair."""

    return match.report if match.report.type == "lost" else match.matched_report


def _ensure_participant(match: Match, user_id: str) -> None:
    if user_id not in {match.report.user_id, match.matched_report.user_id}:
        raise MatchPermissionError("Only the owners of the matched reports can access this match")


def _get_decidable_match(db: Session, match_id: int, user_id: str) -> Match | None:
    match = db.get(Match, match_id)
    if match is None:
        return None
    if lost_side(match).user_id != user_id:
        raise MatchPermissionError("Only the owner of the lost phone can decide this match")
    if match.status != "pending":
        raise MatchStateError(f"Match is already {match.status}")
    return match


def _expire_sibling_matches(db: Session, match: Match) -> int:
    """Expire other pending matches that share a report with ``match``."""

    report_ids = [match.report_id, match.matched_report_id]
    result = db.execute(
        update(Match)
        .where(
            Match.id != match.id,
            Match.status == "pending",
            or_(Match.report_id.in_(report_ids), Match.matched_report_id.in_(report_ids)),
        )
        .values(status="expired")
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount or 0
