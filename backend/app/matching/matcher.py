"""Weighted lost/found report scoring and top-K match selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from app.matching.text_similarity import location_similarity


BRAND_WEIGHT = 0.4
COLOR_WEIGHT = 0.3
LOCATION_WEIGHT = 0.3

MATCH_THRESHOLD = 0.6
MATCH_LIMIT = 5


@dataclass(frozen=True, slots=True)
class MatchableReport:
    """Read-only view of a report with the fields scoring needs."""

    id: Any
    type: str
    brand: str
    color: str
    location: str

    @classmethod
    def from_record(cls, record: Any) -> "MatchableReport":
        """Project any object exposing the report attributes (e.g. an ORM row)."""

        return cls(
            id=record.id,
            type=record.type,
            brand=record.brand,
            color=record.color,
            location=record.location,
        )


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """One ranked match: the candidate report and its similarity score."""

    report: MatchableReport
    score: float


def opposite_type(report_type: str) -> str | None:
    """Return the report type a report of ``report_type`` is matched against."""

    if report_type == "lost":
        return "found"
    if report_type == "found":
        return "lost"
    return None


def similarity(report1: MatchableReport, report2: MatchableReport) -> float:
    """Weighted similarity of two reports in [0, 1].

    Brand and color are all-or-nothing; only the location signal is graded.
    """

    score = 0.0
    max_score = 0.0

    max_score += BRAND_WEIGHT
    if report1.brand.lower() == report2.brand.lower():
        score += BRAND_WEIGHT

    max_score += COLOR_WEIGHT
    if report1.color.lower() == report2.color.lower():
        score += COLOR_WEIGHT

    max_score += LOCATION_WEIGHT
    score += LOCATION_WEIGHT * location_similarity(report1.location, report2.location)

    # Same accumulation order as score, so identical reports land on exactly 1.0.
    return score / max_score


def find_match_candidates(
    query: MatchableReport,
    pool: Iterable[MatchableReport],
    *,
    threshold: float = MATCH_THRESHOLD,
    limit: int = MATCH_LIMIT,
) -> list[MatchCandidate]:
    """Score opposite-type reports against ``query`` and return the best ones.

    Candidates scoring below ``threshold`` are dropped. The rest are ordered by
    descending score, keeping input order among ties, and cut to ``limit``.
    """

    target_type = opposite_type(query.type)
    if target_type is None:
        return []

    candidates = [
        MatchCandidate(report=report, score=similarity(query, report))
        for report in pool
        if report.type == target_type
    ]
    ranked = sorted(
        (candidate for candidate in candidates if candidate.score >= threshold),
        key=lambda candidate: candidate.score,
        reverse=True,
    )
    return ranked[:limit]


def find_matches(
    query: MatchableReport,
    pool: Iterable[MatchableReport],
    *,
    threshold: float = MATCH_THRESHOLD,
    limit: int = MATCH_LIMIT,
) -> list[MatchableReport]:
    """Return the ranked matching reports without their scores."""

    return [
        candidate.report
        for candidate in find_match_candidates(query, pool, threshold=threshold, limit=limit)
    ]
