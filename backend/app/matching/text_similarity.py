"""Deterministic text similarity helpers for report matching."""

from __future__ import annotations

_MAX_WORD_EDITS = 2


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two strings (case-sensitive)."""

    # matrix[i][j]: cost of turning a[:j] into b[:i]
    matrix = [[i] + [0] * len(a) for i in range(len(b) + 1)]
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(
                    matrix[i - 1][j - 1],
                    matrix[i][j - 1],
                    matrix[i - 1][j],
                )
    return matrix[len(b)][len(a)]


def location_similarity(loc1: str, loc2: str) -> float:
    """Return the share of location words that approximately match, in [0, 1].

    A word from ``loc1`` matches when a word of ``loc2`` contains it, is
    contained by it, or lies within two edits. The count is divided by the
    longer of the two word lists.
    """

    words1 = loc1.lower().split()
    words2 = loc2.lower().split()
    total_words = max(len(words1), len(words2))
    if total_words == 0:
        return 0.0

    matches = sum(1 for word in words1 if _word_matches_any(word, words2))
    return matches / total_words


def _word_matches_any(word: str, candidates: list[str]) -> bool:
    return any(
        word in candidate
        or candidate in word
        or edit_distance(word, candidate) <= _MAX_WORD_EDITS
        for candidate in candidates
    )
