"""Transcript accuracy scoring."""

from .accuracy import (
    MAX_TEXT_LENGTH,
    normalize,
    edit_distance,
    score,
    calculate_accuracy,
)

__all__ = [
    "MAX_TEXT_LENGTH",
    "normalize",
    "edit_distance",
    "score",
    "calculate_accuracy",
]
