"""Integration-style tests for report submission, stored matches, and decisions."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from sqlalchemy import create_engine, delete, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base
from app.models.match import Match
from app.models.message import Message
from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services.matches import (
    MatchPermissionError,
    MatchStateError,
    confirm_match,
    get_match,
    list_matches_for_report,
    list_matches_for_user,
    reject_match,
    return_match,
)
from app.services.reports import (
    ReportPermissionError,
    build_match_criteria,
    confidence_for_score,
    get_report_stats,
    list_reports,
    list_user_reports,
    record_report_view,
    rematch_report,
    search_reports,
    submit_report,
    update_report_status,
)


def _payload(report_type: str, **overrides: object) -> ReportCreate:
    data: dict[str, object] = {
        "type": report_type,
        "brand": "Apple",
        "model": "iPhone 14",
        "color": "Black",
        "location": "Central Park, NYC",
        "description": "Black iPhone with a cracked screen protector.",
        "date_lost_found": datetime.now(timezone.utc) - timedelta(days=2),
    }
    data.update(overrides)
    return ReportCreate(**data)


class ReportMatchingIntegrationTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()

    def tearDown(self) -> None:
        self.db.close()

    def test_submission_stores_scored_match_with_criteria(self) -> None:
        found = submit_report(
            self.db,
            "finder",
            _payload(
                "found",
                model=None,
                location="Central Park near the fountain",
                date_lost_found=datetime.now(timezone.utc) - timedelta(days=4),
            ),
        )
        self.assertEqual(found.matches, 0)
        self.assertIn("notify you", found.message)

        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(lost.matches, 1)
        self.assertIn("1 potential match", lost.message)
        match = self.db.scalars(select(Match)).one()
        self.assertEqual(match.report_id, lost.report_id)
        self.assertEqual(match.matched_report_id, found.report_id)
        self.assertAlmostEqual(match.similarity, 0.82)
        self.assertEqual(match.confidence, "high")
        self.assertEqual(match.status, "pending")
        self.assertEqual(match.matched_by, "auto")
        self.assertTrue(match.brand_match)
        self.assertTrue(match.color_match)
        self.assertFalse(match.location_match)
        self.assertFalse(match.model_match)
        self.assertTrue(match.date_range_match)
        self.assertIsNotNone(match.expires_at)

    def test_pool_excludes_own_same_type_and_inactive_reports(self) -> None:
        submit_report(self.db, "owner", _payload("found"))
        submit_report(self.db, "someone", _payload("lost"))
        resolved = submit_report(self.db, "finder", _payload("found"))
        self.db.execute(delete(Match))
        self.db.commit()
        update_report_status(self.db, resolved.report_id, "finder", "resolved")

        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(lost.matches, 0)
        self.assertEqual(list_matches_for_report(self.db, lost.report_id, "owner"), [])

    def test_low_similarity_reports_are_not_stored(self) -> None:
        submit_report(self.db, "finder", _payload("found", color="White", location="Central Park near the fountain"))

        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(lost.matches, 0)
        self.assertEqual(self.db.scalars(select(Match)).all(), [])

    def test_at_most_five_matches_best_first(self) -> None:
        for idx in range(7):
            submit_report(self.db, f"finder-{idx}", _payload("found", location="Central Park museum"))
        submit_report(self.db, "finder-exact", _payload("found"))

        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(lost.matches, 5)
        matches = list_matches_for_user(self.db, "owner")
        self.assertEqual(len(matches), 5)
        self.assertEqual(matches[0].matched_report.user_id, "finder-exact")
        self.assertAlmostEqual(matches[0].similarity, 1.0)
        self.assertEqual(matches[0].confidence, "very_high")
        similarities = [match.similarity for match in matches]
        self.assertEqual(similarities, sorted(similarities, reverse=True))

    def test_rematch_does_not_duplicate_existing_pairs(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(rematch_report(self.db, found.report_id), 0)
        self.assertEqual(len(self.db.scalars(select(Match)).all()), 1)
        self.assertIsNone(rematch_report(self.db, 999))

    def test_only_lost_owner_confirms_and_reports_stay_active(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        lost = submit_report(self.db, "owner", _payload("lost"))
        match = list_matches_for_user(self.db, "finder")[0]

        with self.assertRaises(MatchPermissionError):
            confirm_match(self.db, match.id, "finder")

        confirmed = confirm_match(self.db, match.id, "owner")
        self.assertIsNotNone(confirmed)
        self.assertEqual(confirmed.status, "confirmed")
        self.assertEqual(self.db.get(Report, found.report_id).status, "active")
        self.assertEqual(self.db.get(Report, lost.report_id).status, "active")

        with self.assertRaises(MatchStateError):
            reject_match(self.db, match.id, "owner")
        self.assertEqual(list_matches_for_user(self.db, "owner"), [])
        self.assertEqual(len(list_matches_for_user(self.db, "owner", status="confirmed")), 1)
        self.assertIsNone(confirm_match(self.db, 999, "owner"))

    def test_finder_returns_match_and_both_reports_resolve(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        lost = submit_report(self.db, "owner", _payload("lost"))
        match = list_matches_for_user(self.db, "finder")[0]

        with self.assertRaises(MatchPermissionError):
            return_match(self.db, match.id, "stranger")

        returned = return_match(self.db, match.id, "finder")

        self.assertEqual(returned.status, "confirmed")
        self.assertEqual(self.db.get(Report, found.report_id).status, "resolved")
        self.assertEqual(self.db.get(Report, lost.report_id).status, "resolved")
        with self.assertRaises(MatchStateError):
            return_match(self.db, match.id, "owner")
        self.assertIsNone(return_match(self.db, 999, "owner"))

    def test_owner_can_return_a_confirmed_match(self) -> None:
        submit_report(self.db, "finder", _payload("found"))
        lost = submit_report(self.db, "owner", _payload("lost"))
        match = list_matches_for_user(self.db, "owner")[0]
        confirm_match(self.db, match.id, "owner")

        returned = return_match(self.db, match.id, "owner")

        self.assertEqual(returned.status, "confirmed")
        self.assertEqual(self.db.get(Report, lost.report_id).status, "resolved")

    def test_rejected_match_cannot_be_returned(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        submit_report(self.db, "owner", _payload("lost"))
        match = list_matches_for_user(self.db, "owner")[0]
        reject_match(self.db, match.id, "owner")

        with self.assertRaises(MatchStateError):
            return_match(self.db, match.id, "finder")
        self.assertEqual(self.db.get(Report, found.report_id).status, "active")

    def test_confirming_one_match_expires_pending_siblings(self) -> None:
        first = submit_report(self.db, "finder-a", _payload("found"))
        second = submit_report(self.db, "finder-b", _payload("found"))
        submit_report(self.db, "owner", _payload("lost"))
        by_found = {match.matched_report_id: match for match in list_matches_for_user(self.db, "owner")}
        self.assertEqual(set(by_found), {first.report_id, second.report_id})

        confirm_match(self.db, by_found[first.report_id].id, "owner")

        self.assertEqual(self.db.get(Match, by_found[second.report_id].id).status, "expired")
        self.assertEqual(list_matches_for_user(self.db, "finder-b"), [])
        with self.assertRaises(MatchStateError):
            confirm_match(self.db, by_found[second.report_id].id, "owner")

    def test_returning_one_match_expires_pending_siblings(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        submit_report(self.db, "owner-a", _payload("lost"))
        submit_report(self.db, "owner-b", _payload("lost"))
        matches = list_matches_for_user(self.db, "finder")
        self.assertEqual(len(matches), 2)
        kept = next(match for match in matches if match.report.user_id == "owner-a")
        sibling = next(match for match in matches if match.report.user_id == "owner-b")

        return_match(self.db, kept.id, "finder")

        self.assertEqual(self.db.get(Match, sibling.id).status, "expired")
        self.assertEqual(self.db.get(Report, found.report_id).status, "resolved")
        self.assertEqual(list_matches_for_user(self.db, "owner-b"), [])

    def test_match_reads_are_limited_to_participants(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        lost = submit_report(self.db, "owner", _payload("lost"))
        match = list_matches_for_user(self.db, "owner")[0]

        self.assertEqual(get_match(self.db, match.id, "finder").id, match.id)
        self.assertEqual(get_match(self.db, match.id, "owner").id, match.id)
        self.assertIsNone(get_match(self.db, 999, "owner"))
        with self.assertRaises(MatchPermissionError):
            get_match(self.db, match.id, "stranger")

        self.assertEqual(len(list_matches_for_report(self.db, found.report_id, "finder")), 1)
        self.assertIsNone(list_matches_for_report(self.db, 999, "owner"))
        with self.assertRaises(MatchPermissionError):
            list_matches_for_report(self.db, lost.report_id, "finder")

    def test_expired_found_report_is_not_matched_or_listed(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        stale = self.db.get(Report, found.report_id)
        stale.expires_at = datetime.now(timezone.utc) - timedelta(days=30)
        self.db.commit()

        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(lost.matches, 0)
        self.assertEqual(self.db.scalars(select(Match)).all(), [])
        self.assertEqual([report.id for report in list_reports(self.db)], [lost.report_id])
        self.assertEqual(list_reports(self.db, report_type="found"), [])
        self.assertEqual([report.id for report in search_reports(self.db, "iphone")], [lost.report_id])

    def test_expired_matches_drop_out_of_listings(self) -> None:
        found = submit_report(self.db, "finder", _payload("found"))
        submit_report(self.db, "owner", _payload("lost"))
        match = self.db.scalars(select(Match)).one()
        match.expires_at = datetime.now(timezone.utc) - timedelta(days=1)
        self.db.commit()

        self.assertEqual(list_matches_for_user(self.db, "owner"), [])
        self.assertEqual(list_matches_for_report(self.db, found.report_id, "finder"), [])

    def test_rematch_picks_up_changed_pool_and_checks_owner(self) -> None:
        found = submit_report(self.db, "finder", _payload("found", brand="Samsung", color="White"))
        lost = submit_report(self.db, "owner", _payload("lost"))
        self.assertEqual(lost.matches, 0)
        corrected = self.db.get(Report, found.report_id)
        corrected.brand = "Apple"
        corrected.color = "Black"
        self.db.commit()

        with self.assertRaises(ReportPermissionError):
            rematch_report(self.db, lost.report_id, "finder")

        self.assertEqual(rematch_report(self.db, lost.report_id, "owner"), 1)
        self.assertEqual(rematch_report(self.db, lost.report_id, "owner"), 0)

    def test_rematch_failure_rolls_back_and_logs(self) -> None:
        submit_report(self.db, "finder", _payload("found", brand="Samsung"))
        lost = submit_report(self.db, "owner", _payload("lost"))

        with patch("app.services.reports._store_matches_for_report", side_effect=RuntimeError("pool unavailable")):
            with self.assertLogs("app.services.reports", level="ERROR") as captured:
                with self.assertRaises(RuntimeError):
                    rematch_report(self.db, lost.report_id)

        self.assertIn("reports.rematch_failed", captured.output[0])
        self.assertEqual(self.db.get(Report, lost.report_id).status, "active")


    def test_reject_keeps_reports_active(self) -> None:
        submit_report(self.db, "owner", _payload("lost"))
        found = submit_report(self.db, "finder", _payload("found"))
        match = list_matches_for_user(self.db, "owner")[0]

        rejected = reject_match(self.db, match.id, "owner")

        self.assertEqual(rejected.status, "rejected")
        self.assertEqual(self.db.get(Report, found.report_id).status, "active")

    def test_report_queries_and_stats(self) -> None:
        found = submit_report(self.db, "finder", _payload("found", brand="Samsung", location="Airport terminal 2"))
        lost = submit_report(self.db, "owner", _payload("lost"))

        self.assertEqual(len(list_reports(self.db)), 2)
        self.assertEqual([report.brand for report in list_reports(self.db, report_type="found")], ["Samsung"])
        self.assertEqual(len(list_reports(self.db, brand="apple")), 1)
        self.assertEqual([report.id for report in search_reports(self.db, "TERMINAL")], [found.report_id])
        self.assertEqual(search_reports(self.db, "   "), [])
        self.assertEqual(len(list_user_reports(self.db, "owner")), 1)

        viewed = record_report_view(self.db, lost.report_id)
        self.assertEqual(viewed.view_count, 1)
        self.assertIsNone(record_report_view(self.db, 999))

        with self.assertRaises(ReportPermissionError):
            update_report_status(self.db, lost.report_id, "finder", "deleted")

        stats = get_report_stats(self.db)
        self.assertEqual(stats.total_reports, 2)
        self.assertEqual(stats.lost_reports, 1)
        self.assertEqual(stats.found_reports, 1)
        self.assertEqual(stats.total_matches, 0)

    def test_match_criteria_flags(self) -> None:
        now = datetime.now(timezone.utc)
        report = Report(
            brand="Apple",
            color="Black",
            model="Pixel",
            location="Near Central Park gate",
            date_lost_found=now,
        )
        candidate = Report(
            brand="apple",
            color="Red",
            model="pixel",
            location="central park",
            date_lost_found=(now - timedelta(days=8)).replace(tzinfo=None),
        )

        criteria = build_match_criteria(report, candidate, date_window_days=7)

        self.assertEqual(
            criteria,
            {
                "brand_match": True,
                "color_match": False,
                "location_match": True,
                "model_match": True,
                "date_range_match": False,
            },
        )

    def test_confidence_labels(self) -> None:
        self.assertEqual(confidence_for_score(0.95), "very_high")
        self.assertEqual(confidence_for_score(0.82), "high")
        self.assertEqual(confidence_for_score(0.6), "medium")
        self.assertEqual(confidence_for_score(0.3), "low")

    def _reset_tables(self) -> None:
        self.db.execute(delete(Message))
        self.db.execute(delete(Match))
        self.db.execute(delete(Report))
        self.db.commit()


if __name__ == "__main__":
    unittest.main()
