"""Capture session data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SessionState(Enum):
    """Lifecycle of a capture session."""
    IDLE = "idle"
    ACTIVE = "active"
    STOPPING = "stopping"


@dataclass
class RecognitionFragment:
    """One recognition result as emitted by the platform."""
    text: str
    is_final: bool
    confidence: Optional[float] = None


@dataclass
class TranscriptUpdate:
    """Observer notification with the transcript so far."""
    transcript: str
    is_final: bool


@dataclass
class CaptureResult:
    """Outcome of a stopped capture session."""
    text: str
    audio: Optional[bytes] = None  # None when no audio fragments were recorded
    mime_type: Optional[str] = None
