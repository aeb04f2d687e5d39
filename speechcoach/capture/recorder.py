"""PyAudio microphone recorder emitting PCM fragments on a background thread."""

import logging
import time
from threading import Thread, Event
from typing import Callable, Optional

import numpy as np
import pyaudio

from ..errors import AcquisitionError, CaptureErrorKind
from .base import AudioRecorder

logger = logging.getLogger(__name__)


class PyAudioRecorder(AudioRecorder):
    """Records 16-bit mono PCM and hands over one fragment per timeslice."""

    mime_type = "audio/L16"

    def __init__(self, sample_rate: int = 16000, chunk_size: int = 1024, channels: int = 1):
        """Initialize recorder.

        Args:
            sample_rate: Audio sample rate in Hz
            chunk_size: Samples read from the device per call
            channels: Number of audio channels (1 for mono)
        """
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels

        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False
        self.total_fragments = 0
        self.peak_level = 0.0

        self.pyaudio_instance = None
        self.stream = None

    def start(self, on_fragment: Callable[[bytes], None], timeslice: float = 1.0) -> None:
        """Open the microphone and start recording in a background thread."""
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        try:
            self.pyaudio_instance = pyaudio.PyAudio()
        except OSError as e:
            raise AcquisitionError(CaptureErrorKind.UNSUPPORTED, f"PyAudio could not be initialized: {e}") from e

        try:
            self.stream = self.pyaudio_instance.open(
                format=pyaudio.paInt16,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
            )
        except OSError as e:
            self._close()
            raise AcquisitionError(CaptureErrorKind.NO_DEVICE, f"Could not open microphone: {e}") from e

        logger.info(f"Audio stream opened: {self.sample_rate}Hz, {self.chunk_size} samples/chunk")
        self.stop_event.clear()
        self.total_fragments = 0
        self.peak_level = 0.0
        self.recording_thread = Thread(
            target=self._record_continuously, args=(on_fragment, timeslice), daemon=True
        )
        self.recording_thread.name = "AudioRecorderThread"
        self.recording_thread.start()
        self.is_recording = True

    def stop(self) -> None:
        """Stop recording and release the microphone."""
        if not self.is_recording:
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()
        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

        self.is_recording = False
        logger.info(f"Recording stopped. Total fragments: {self.total_fragments}")

    def _record_continuously(self, on_fragment: Callable[[bytes], None], timeslice: float) -> None:
        """Read the device and flush the buffer every timeslice seconds."""
        buffer = bytearray()
        last_flush = time.monotonic()
        try:
            while not self.stop_event.is_set():
                chunk = self.stream.read(self.chunk_size, exception_on_overflow=False)
                buffer.extend(chunk)
                self._update_peak(chunk)
                if time.monotonic() - last_flush >= timeslice:
                    self._emit(on_fragment, buffer)
                    buffer = bytearray()
                    last_flush = time.monotonic()
            # Flush what was captured since the last timeslice
            self._emit(on_fragment, buffer)
        except OSError as e:
            logger.error(f"Audio recording error: {e}")
        finally:
            self._close()

    def _emit(self, on_fragment: Callable[[bytes], None], buffer: bytearray) -> None:
        if not buffer:
            return
        self.total_fragments += 1
        on_fragment(bytes(buffer))

    def _update_peak(self, chunk: bytes) -> None:
        samples = np.frombuffer(chunk, dtype=np.int16)
        if samples.size:
            level = float(np.abs(samples.astype(np.int32)).max()) / 32768.0
            self.peak_level = max(self.peak_level, level)

    def _close(self) -> None:
        if self.stream is not None:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except OSError as e:
                logger.debug(f"Error closing audio stream: {e}")
            self.stream = None
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
