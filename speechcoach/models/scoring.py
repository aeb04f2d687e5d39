"""Scoring data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreResult:
    """Accuracy of a spoken attempt against its reference text."""
    score: int  # 0..100
    distance: int  # edit distance between the normalized strings
