"""Speech capture: recognition streams, recorders and the capture session."""

from .base import AudioRecorder, RecognitionErrorCode, RecognitionSink, RecognitionStream
from .retry import BoundedRestarter, RestartPolicy
from .session import CaptureSession
from .publisher import TranscriptPublisher

__all__ = [
    "AudioRecorder",
    "RecognitionErrorCode",
    "RecognitionSink",
    "RecognitionStream",
    "BoundedRestarter",
    "RestartPolicy",
    "CaptureSession",
    "TranscriptPublisher",
]
