"""Unit tests for weighted report scoring and match selection."""

import unittest

from app.matching import (
    BRAND_WEIGHT,
    COLOR_WEIGHT,
    LOCATION_WEIGHT,
    MATCH_LIMIT,
    MATCH_THRESHOLD,
    MatchableReport,
    find_match_candidates,
    find_matches,
    opposite_type,
    similarity,
)


def _report(
    report_id: int,
    report_type: str,
    *,
    brand: str = "Apple",
    color: str = "Black",
    location: str = "Central Park, NYC",
) -> MatchableReport:
    return MatchableReport(id=report_id, type=report_type, brand=brand, color=color, location=location)


class SimilarityTests(unittest.TestCase):
    def test_weights_sum_to_one(self) -> None:
        self.assertAlmostEqual(BRAND_WEIGHT + COLOR_WEIGHT + LOCATION_WEIGHT, 1.0)

    def test_identical_reports_score_exactly_one(self) -> None:
        report = _report(1, "lost")
        self.assertEqual(similarity(report, report), 1.0)

    def test_brand_and_color_compare_case_insensitively(self) -> None:
        left = _report(1, "lost", brand="APPLE", color="black")
        right = _report(2, "found", brand="apple", color="BLACK")
        self.assertEqual(similarity(left, right), 1.0)

    def test_query_location_inside_longer_candidate_location(self) -> None:
        query = _report(1, "lost")
        candidate = _report(2, "found", location="Central Park near the fountain")
        self.assertAlmostEqual(similarity(query, candidate), 0.82)

    def test_color_mismatch_drops_below_threshold(self) -> None:
        query = _report(1, "lost")
        candidate = _report(2, "found", color="White", location="Central Park near the fountain")
        score = similarity(query, candidate)
        self.assertAlmostEqual(score, 0.52)
        self.assertLess(score, MATCH_THRESHOLD)

    def test_nothing_in_common_scores_zero(self) -> None:
        query = _report(1, "lost", brand="Apple", color="Black", location="airport")
        candidate = _report(2, "found", brand="Samsung", color="White", location="harbour")
        self.assertEqual(similarity(query, candidate), 0.0)

    def test_score_bounds(self) -> None:
        query = _report(1, "lost", location="bus")
        for candidate in (
            _report(2, "found", location="bus bus bus"),
            _report(3, "found", brand="Nokia", location="train"),
            _report(4, "found", color="Red", location="bus station"),
        ):
            score = similarity(query, candidate)
            self.assertGreaterEqual(score, 0.0)
            self.assertLessEqual(score, 1.0)


class FindMatchesTests(unittest.TestCase):
    def test_empty_pool_returns_empty_list(self) -> None:
        self.assertEqual(find_matches(_report(1, "lost"), []), [])

    def test_match_above_threshold_is_returned(self) -> None:
        query = _report(1, "lost")
        candidate = _report(2, "found", location="Central Park near the fountain")
        self.assertEqual(find_matches(query, [candidate]), [candidate])

    def test_match_below_threshold_is_dropped(self) -> None:
        query = _report(1, "lost")
        candidate = _report(2, "found", color="White", location="Central Park near the fountain")
        self.assertEqual(find_matches(query, [candidate]), [])

    def test_same_type_reports_are_never_candidates(self) -> None:
        query = _report(1, "lost")
        pool = [_report(2, "lost"), _report(3, "lost")]
        self.assertEqual(find_matches(query, pool), [])

    def test_found_query_matches_lost_reports(self) -> None:
        query = _report(1, "found")
        lost = _report(2, "lost")
        found = _report(3, "found")
        self.assertEqual(find_matches(query, [found, lost]), [lost])

    def test_unknown_query_type_returns_empty_list(self) -> None:
        self.assertIsNone(opposite_type("stolen"))
        query = _report(1, "stolen")
        self.assertEqual(find_matches(query, [_report(2, "lost"), _report(3, "found")]), [])

    def test_results_are_capped_sorted_and_stable(self) -> None:
        query = _report(0, "lost", location="central park fountain")
        weaker = [_report(100 + idx, "found", location="harbor dock") for idx in range(2)]
        stronger = [_report(idx, "found", location="central park museum") for idx in range(1, 8)]

        candidates = find_match_candidates(query, weaker + stronger)

        self.assertEqual(len(candidates), MATCH_LIMIT)
        self.assertEqual([candidate.report.id for candidate in candidates], [1, 2, 3, 4, 5])
        for candidate in candidates:
            self.assertAlmostEqual(candidate.score, 0.9)
        scores = [candidate.score for candidate in candidates]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_lower_scores_follow_higher_scores(self) -> None:
        query = _report(0, "lost", location="central park fountain")
        weaker = _report(1, "found", location="harbor dock")
        stronger = _report(2, "found", location="central park museum")

        candidates = find_match_candidates(query, [weaker, stronger])

        self.assertEqual([candidate.report.id for candidate in candidates], [2, 1])
        self.assertAlmostEqual(candidates[1].score, 0.7)
        for candidate in candidates:
            self.assertGreaterEqual(candidate.score, MATCH_THRESHOLD)

    def test_threshold_and_limit_are_overridable(self) -> None:
        query = _report(1, "lost")
        near = _report(2, "found", color="White", location="Central Park near the fountain")
        exact = _report(3, "found")

        self.assertEqual(find_matches(query, [near, exact], threshold=0.5), [exact, near])
        self.assertEqual(find_matches(query, [near, exact], threshold=0.5, limit=1), [exact])

    def test_inputs_are_not_mutated(self) -> None:
        query = _report(1, "lost")
        pool = [_report(3, "found", color="Red"), _report(2, "found")]
        snapshot = list(pool)

        find_matches(query, pool)

        self.assertEqual(pool, snapshot)
        self.assertEqual(query, _report(1, "lost"))

    def test_from_record_projects_attributes(self) -> None:
        class _Row:
            id = 7
            type = "found"
            brand = "Google"
            color = "Blue"
            location = "Library"
            model = "Pixel 8"

        self.assertEqual(
            MatchableReport.from_record(_Row()),
            MatchableReport(id=7, type="found", brand="Google", color="Blue", location="Library"),
        )


if __name__ == "__main__":
    unittest.main()
