"""Accuracy scoring of a spoken attempt against its reference sentence.

Both strings are normalized (case-folded, punctuation dropped, trimmed) and
compared with a Levenshtein edit distance. The score is the share of the
longer string that survives the edits, as a whole percentage.
"""

import re
from typing import List

from ..models.scoring import ScoreResult

# Callers cap input at this length; the DP table is len(a) x len(b).
MAX_TEXT_LENGTH = 5000

_NON_WORD = re.compile(r"[^\w\s]")


def normalize(text: str) -> str:
    """Case-fold, drop punctuation and trim surrounding whitespace."""
    return _NON_WORD.sub("", text.casefold()).strip()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute."""
    m, n = len(a), len(b)
    dp: List[List[int]] = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j], dp[i][j - 1], dp[i - 1][j - 1])

    return dp[m][n]


def score(reference: str, spoken: str) -> ScoreResult:
    """Score a spoken transcript against the reference text.

    Args:
        reference: The sentence the user was asked to read
        spoken: What the recognizer heard

    Returns:
        ScoreResult with a 0-100 score and the edit distance
    """
    s1 = normalize(reference)
    s2 = normalize(spoken)

    if s1 == s2:
        return ScoreResult(score=100, distance=0)
    if not s1 or not s2:
        return ScoreResult(score=0, distance=max(len(s1), len(s2)))

    distance = edit_distance(s1, s2)
    max_len = max(len(s1), len(s2))
    # round-half-up of 100 * (max_len - distance) / max_len in integer arithmetic
    value = (200 * (max_len - distance) + max_len) // (2 * max_len)
    return ScoreResult(score=value, distance=distance)


def calculate_accuracy(reference: str, spoken: str) -> int:
    """Return only the 0-100 accuracy score."""
    return score(reference, spoken).score
