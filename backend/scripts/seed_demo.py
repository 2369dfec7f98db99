"""Seed demo lost/found phone reports and run automatic matching.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import delete, select

# Make `app` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.db.session import SessionLocal
from app.models.match import Match
from app.models.message import Message
from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services.reports import submit_report


DEMO_USER_PREFIX = "demo-"


def build_demo_reports() -> list[tuple[str, ReportCreate]]:
    """Return deterministic (user_id, report) pairs; found phones come first."""

    base = datetime.now(timezone.utc).replace(microsecond=0) - timedelta(days=3)
    payloads = [
        ("demo-finder-1", "found", "Apple", "Black", "Central Park near the fountain"),
        ("demo-finder-2", "found", "Samsung", "White", "Grand Central Terminal track 12"),
        ("demo-finder-3", "found", "Google", "Blue", "Brooklyn Public Library"),
        ("demo-owner-1", "lost", "Apple", "Black", "Central Park, NYC"),
        ("demo-owner-2", "lost", "Samsung", "White", "Grand Centrl Terminal"),
    ]
    return [
        (
            user_id,
            ReportCreate(
                type=report_type,
                brand=brand,
                color=color,
                location=location,
                description=f"{color} {brand} phone {report_type} around {location}.",
                date_lost_found=base + timedelta(hours=idx),
            ),
        )
        for idx, (user_id, report_type, brand, color, location) in enumerate(payloads)
    ]


def reset_demo_data(db) -> None:
    """Remove reports (and their matches/messages) owned by demo users."""

    demo_reports = Report.user_id.startswith(DEMO_USER_PREFIX)
    report_ids = list(db.scalars(select(Report.id).where(demo_reports)))
    if report_ids:
        db.execute(delete(Message).where(Message.report_id.in_(report_ids)))
        db.execute(
            delete(Match).where(Match.report_id.in_(report_ids) | Match.matched_report_id.in_(report_ids))
        )
        db.execute(delete(Report).where(Report.id.in_(report_ids)))
    db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo phone reports and run matching.")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing demo reports before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()

    with SessionLocal() as db:
        if not args.no_reset:
            reset_demo_data(db)
        results = [submit_report(db, user_id, payload) for user_id, payload in build_demo_reports()]

    print("Seed complete")
    for result in results:
        print(f"report_id={result.report_id} matches={result.matches}")
    print()
    print("Inspect:")
    print("  GET /reports")
    print("  GET /matches  (header X-User-Id: demo-owner-1)")


if __name__ == "__main__":
    main()
