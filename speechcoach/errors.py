"""Exception types and user-facing error messages for SpeechCoach."""

from enum import Enum
from typing import Optional


class CaptureErrorKind(Enum):
    """Classified cause of a failed capture session."""
    PERMISSION_DENIED = "permission_denied"
    NO_DEVICE = "no_device"
    UNSUPPORTED = "unsupported"
    NETWORK = "network"
    UNKNOWN = "unknown"


CAPTURE_ERROR_MESSAGES = {
    CaptureErrorKind.PERMISSION_DENIED: "Microphone permission denied.",
    CaptureErrorKind.NO_DEVICE: "No microphone found. Please check your device.",
    CaptureErrorKind.UNSUPPORTED: "Speech recognition not supported.",
    CaptureErrorKind.NETWORK: "Network error. Please check your connection.",
    CaptureErrorKind.UNKNOWN: "Failed to start recording. Please try again.",
}


class SpeechCoachError(Exception):
    """Base class for all SpeechCoach errors."""


class AcquisitionError(SpeechCoachError):
    """A capture capability (recognizer or recorder) could not be acquired."""

    def __init__(self, kind: CaptureErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(detail or CAPTURE_ERROR_MESSAGES[kind])


class CaptureError(SpeechCoachError):
    """A capture session was aborted. Delivered through the session's error callback."""

    def __init__(self, kind: CaptureErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or CAPTURE_ERROR_MESSAGES[kind]
        super().__init__(self.message)


class AnalysisRequestError(SpeechCoachError):
    """The analysis request is invalid and was not sent."""


class AnalysisServiceError(SpeechCoachError):
    """The generative AI service rejected or failed the request."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class SentenceGenerationError(SpeechCoachError):
    """Practice sentences could not be generated."""
