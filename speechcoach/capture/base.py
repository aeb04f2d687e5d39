"""Abstract capture capabilities used by CaptureSession.

Platform speech recognizers and recorders are wrapped behind these
interfaces. Events are pushed into a RecognitionSink one at a time, in the
order the platform emits them.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List

from ..models.capture import RecognitionFragment


class RecognitionErrorCode(Enum):
    """Error codes a recognition stream can report while running."""
    NO_SPEECH = "no-speech"
    ABORTED = "aborted"
    AUDIO_CAPTURE = "audio-capture"
    NOT_ALLOWED = "not-allowed"
    NETWORK = "network"
    OTHER = "other"


class RecognitionSink(ABC):
    """Receiver of recognition stream events."""

    @abstractmethod
    def on_result(self, fragments: List[RecognitionFragment]) -> None:
        """Handle a batch of new recognition results."""

    @abstractmethod
    def on_end(self) -> None:
        """Handle the stream terminating, whether requested or not."""

    @abstractmethod
    def on_error(self, code: RecognitionErrorCode, detail: str = "") -> None:
        """Handle an error reported by the stream."""


class RecognitionStream(ABC):
    """A continuous speech-to-text capability."""

    @abstractmethod
    def start(self, sink: RecognitionSink) -> None:
        """Begin recognition and deliver events to sink.

        Raises:
            AcquisitionError: If the capability cannot be acquired
        """

    @abstractmethod
    def stop(self) -> None:
        """Ask the stream to end. Any pending final result may still arrive."""


class AudioRecorder(ABC):
    """A recorder emitting encoded audio fragments periodically."""

    mime_type: str = "audio/wav"

    @abstractmethod
    def start(self, on_fragment: Callable[[bytes], None], timeslice: float = 1.0) -> None:
        """Start recording, calling on_fragment roughly every timeslice seconds.

        Raises:
            AcquisitionError: If no recording device is available
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop recording and release the device."""
