"""Lost/found report matching package."""

from app.matching.matcher import (
    BRAND_WEIGHT,
    COLOR_WEIGHT,
    LOCATION_WEIGHT,
    MATCH_LIMIT,
    MATCH_THRESHOLD,
    MatchableReport,
    MatchCandidate,
    find_match_candidates,
    find_matches,
    opposite_type,
    similarity,
)
from app.matching.text_similarity import edit_distance, location_similarity

__all__ = [
    "BRAND_WEIGHT",
    "COLOR_WEIGHT",
    "LOCATION_WEIGHT",
    "MATCH_LIMIT",
    "MATCH_THRESHOLD",
    "MatchableReport",
    "MatchCandidate",
    "edit_distance",
    "find_match_candidates",
    "find_matches",
    "location_similarity",
    "opposite_type",
    "similarity",
]
