"""Data models for the SpeechCoach application."""

from .capture import (
    SessionState,
    RecognitionFragment,
    TranscriptUpdate,
    CaptureResult,
)
from .scoring import ScoreResult
from .practice import AnalysisResult, PracticeSentence

__all__ = [
    "SessionState",
    "RecognitionFragment",
    "TranscriptUpdate",
    "CaptureResult",
    "ScoreResult",
    "AnalysisResult",
    "PracticeSentence",
]
