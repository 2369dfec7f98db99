"""Report submission, automatic matching, and report queries."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from time import perf_counter
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.matching import MatchableReport, find_match_candidates, opposite_type
from app.models.match import Match
from app.models.report import Report
from app.services.matches import not_expired
from app.schemas.report import ReportCreate, ReportStats, ReportSubmissionResult

logger = logging.getLogger(__name__)


class ReportPermissionError(Exception):
    """Raised when a user changes a report they do not own."""


def submit_report(db: Session, user_id: str, payload: ReportCreate) -> ReportSubmissionResult:
    """Persist a new report and store matches against the opposite-type pool."""

    total_started = perf_counter()
    settings = get_settings()
    try:
        report = Report(
            user_id=user_id,
            **payload.model_dump(),
            status="active",
            view_count=0,
            is_verified=False,
            expires_at=datetime.now(timezone.utc) + timedelta(days=settings.report_expiry_days),
        )
        db.add(report)
        db.flush()

        created = _store_matches_for_report(db, report, settings)
        db.commit()
        db.refresh(report)
        logger.info(
            "reports.submit_timing report_id=%s type=%s matches=%d total_ms=%.2f",
            report.id,
            report.type,
            created,
            (perf_counter() - total_started) * 1000.0,
        )
    except Exception:
        db.rollback()
        logger.exception(
            "reports.submit_failed user_id=%s elapsed_ms=%.2f",
            user_id,
            (perf_counter() - total_started) * 1000.0,
        )
        raise

    if created:
        message = f"Report submitted successfully! We found {created} potential match(es)!"
    else:
        message = "Report submitted successfully! We'll notify you if we find any matches."
    return ReportSubmissionResult(report_id=report.id, matches=created, message=message)


def rematch_report(db: Session, report_id: int, user_id: str | None = None) -> int | None:
    """Re-run matching for an existing active report; returns new match rows.

    When ``user_id`` is given only the report owner may trigger the rerun.
    """

    started = perf_counter()
    report = db.get(Report, report_id)
    if report is None:
        return None
    if user_id is not None and report.user_id != user_id:
        raise ReportPermissionError("Only the report owner can rerun matching")
    if report.status != "active":
        return 0
    try:
        created = _store_matches_for_report(db, report, get_settings())
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(
            "reports.rematch_failed report_id=%s elapsed_ms=%.2f",
            report_id,
            (perf_counter() - started) * 1000.0,
        )
        raise
    logger.info(
        "reports.rematch report_id=%s matches=%d total_ms=%.2f",
        report_id,
        created,
        (perf_counter() - started) * 1000.0,
    )
    return created



def build_match_criteria(report: Report, candidate: Report, *, date_window_days: int) -> dict[str, bool]:
    """Auxiliary equality flags stored alongside a match."""

    model_match = False
    if report.model and candidate.model:
        model_match = report.model.lower() == candidate.model.lower()
    date_gap = abs(_as_utc(report.date_lost_found) - _as_utc(candidate.date_lost_found))
    return {
        "brand_match": report.brand.lower() == candidate.brand.lower(),
        "color_match": report.color.lower() == candidate.color.lower(),
        "location_match": candidate.location.lower() in report.location.lower(),
        "model_match": model_match,
        "date_range_match": date_gap < timedelta(days=date_window_days),
    }


def confidence_for_score(score: float) -> str:
    """Map a similarity score onto the stored confidence label."""

    if score >= 0.9:
        return "very_high"
    if score >= 0.8:
        return "high"
    if score >= 0.6:
        return "medium"
    return "low"


def get_report(db: Session, report_id: int) -> Report | None:
    return db.get(Report, report_id)


def record_report_view(db: Session, report_id: int) -> Report | None:
    """Increment the view counter of one report."""

    report = db.get(Report, report_id)
    if report is None:
        return None
    report.view_count += 1
    db.commit()
    db.refresh(report)
    return report


def list_reports(
    db: Session,
    *,
    report_type: str | None = None,
    brand: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Report]:
    """Return active, unexpired reports, newest first."""

    stmt = select(Report).where(Report.status == "active", not_expired(Report.expires_at))
    if report_type is not None:
        stmt = stmt.where(Report.type == report_type)
    if brand:
        stmt = stmt.where(func.lower(Report.brand) == brand.strip().lower())
    stmt = stmt.order_by(Report.created_at.desc(), Report.id.desc()).limit(limit).offset(offset)
    return list(db.scalars(stmt).all())


def list_user_reports(db: Session, user_id: str) -> list[Report]:
    stmt = (
        select(Report)
        .where(Report.user_id == user_id, Report.status != "deleted")
        .order_by(Report.created_at.desc(), Report.id.desc())
    )
    return list(db.scalars(stmt).all())


def search_reports(
    db: Session,
    query: str,
    *,
    report_type: str | None = None,
    limit: int = 50,
) -> list[Report]:
    """Case-insensitive substring search across the descriptive report fields."""

    term = query.strip().lower()
    if not term:
        return []
    stmt = select(Report).where(
        Report.status == "active",
        not_expired(Report.expires_at),
        or_(
            *(
                func.lower(column).contains(term, autoescape=True)
                for column in (
                    Report.brand,
                    Report.model,
                    Report.color,
                    Report.location,
                    Report.description,
                )
            )
        ),
    )
    if report_type is not None:
        stmt = stmt.where(Report.type == report_type)
    stmt = stmt.order_by(Report.created_at.desc(), Report.id.desc()).limit(limit)
    return list(db.scalars(stmt).all())


def get_report_stats(db: Session) -> ReportStats:
    def _count(model: Any, *conditions: Any) -> int:
        return int(db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0)

    return ReportStats(
        total_reports=_count(Report, Report.status != "deleted"),
        active_reports=_count(Report, Report.status == "active"),
        lost_reports=_count(Report, Report.type == "lost", Report.status != "deleted"),
        found_reports=_count(Report, Report.type == "found", Report.status != "deleted"),
        resolved_reports=_count(Report, Report.status == "resolved"),
        total_matches=_count(Match),
        confirmed_matches=_count(Match, Match.status == "confirmed"),
    )


def update_report_status(db: Session, report_id: int, user_id: str, status: str) -> Report | None:
    """Change the status of a report owned by ``user_id``."""

    report = db.get(Report, report_id)
    if report is None:
        return None
    if report.user_id != user_id:
        raise ReportPermissionError("Only the report owner can change its status")
    report.status = status
    db.commit()
    db.refresh(report)
    return report


def _store_matches_for_report(db: Session, report: Report, settings: Settings) -> int:
    pool = _load_match_pool(db, report)
    candidates = find_match_candidates(
        MatchableReport.from_record(report),
        [MatchableReport.from_record(record) for record in pool],
        threshold=settings.match_threshold,
        limit=settings.match_limit,
    )
    if not candidates:
        return 0

    pool_by_id = {record.id: record for record in pool}
    known_pairs = _existing_pairs(db, report.id, [candidate.report.id for candidate in candidates])
    now = datetime.now(timezone.utc)
    created = 0
    for candidate in candidates:
        if candidate.report.id in known_pairs:
            continue
        matched = pool_by_id[candidate.report.id]
        db.add(
            Match(
                report_id=report.id,
                matched_report_id=matched.id,
                similarity=candidate.score,
                matched_by="auto",
                status="pending",
                confidence=confidence_for_score(candidate.score),
                expires_at=now + timedelta(days=settings.match_expiry_days),
                **build_match_criteria(report, matched, date_window_days=settings.match_date_window_days),
            )
        )
        created += 1
    db.flush()
    return created


def _load_match_pool(db: Session, report: Report) -> list[Report]:
    """Active, unexpired opposite-type reports owned by other users, oldest first."""

    target_type = opposite_type(report.type)
    if target_type is None:
        return []
    stmt = (
        select(Report)
        .where(
            Report.type == target_type,
            Report.status == "active",
            not_expired(Report.expires_at),
            Report.user_id != report.user_id,
            Report.id != report.id,
        )
        .order_by(Report.created_at.asc(), Report.id.asc())
    )
    return list(db.scalars(stmt).all())


def _existing_pairs(db: Session, report_id: int, candidate_ids: list[int]) -> set[int]:
    """Candidate ids already paired with ``report_id`` in either direction."""

    stmt = select(Match.report_id, Match.matched_report_id).where(
        or_(
            (Match.report_id == report_id) & Match.matched_report_id.in_(candidate_ids),
            (Match.matched_report_id == report_id) & Match.report_id.in_(candidate_ids),
        )
    )
    paired: set[int] = set()
    for left_id, right_id in db.execute(stmt).all():
        paired.add(right_id if left_id == report_id else left_id)
    return paired


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
