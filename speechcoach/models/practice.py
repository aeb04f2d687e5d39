"""Data models for AI analysis and practice sentences."""

from dataclasses import dataclass
import datetime
from typing import Optional


@dataclass
class AnalysisResult:
    """AI-generated delivery score and feedback."""
    score: int
    feedback: str
    raw_response: Optional[str] = None


@dataclass
class PracticeSentence:
    """A practice sentence with delivery tips."""
    sentence: str
    tips: str
    category: str
    date: Optional[datetime.date] = None
    difficulty_level: str = "medium"
