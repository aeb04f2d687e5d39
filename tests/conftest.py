"""Pytest configuration and fixtures for SpeechCoach tests."""

import asyncio
import logging
import threading
from typing import Callable, Optional
from unittest.mock import Mock, patch

import numpy as np
import pytest

from speechcoach.capture.base import AudioRecorder, RecognitionErrorCode, RecognitionSink, RecognitionStream
from speechcoach.models.capture import RecognitionFragment


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without hardware or network")
    config.addinivalue_line("markers", "integration: tests wiring several components together")


class FakeRecognizer(RecognitionStream):
    """Recognition stream driven by the test through its sink."""

    def __init__(self, start_error: Optional[Exception] = None):
        self.start_error = start_error
        self.sink: Optional[RecognitionSink] = None
        self.start_calls = 0
        self.stop_calls = 0
        self.lock = threading.Lock()

    def start(self, sink: RecognitionSink) -> None:
        with self.lock:
            self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.sink = sink

    def stop(self) -> None:
        with self.lock:
            self.stop_calls += 1

    # Helpers that play the platform's part
    def interim(self, text: str) -> None:
        self.sink.on_result([RecognitionFragment(text=text, is_final=False)])

    def final(self, text: str) -> None:
        self.sink.on_result([RecognitionFragment(text=text, is_final=True)])

    def end(self) -> None:
        self.sink.on_end()

    def error(self, code: RecognitionErrorCode) -> None:
        self.sink.on_error(code)


class FakeRecorder(AudioRecorder):
    """Recorder that only emits the fragments the test pushes."""

    mime_type = "audio/webm"

    def __init__(self, start_error: Optional[Exception] = None):
        self.start_error = start_error
        self.on_fragment: Optional[Callable[[bytes], None]] = None
        self.timeslice: Optional[float] = None
        self.start_calls = 0
        self.stop_calls = 0

    def start(self, on_fragment: Callable[[bytes], None], timeslice: float = 1.0) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.on_fragment = on_fragment
        self.timeslice = timeslice

    def stop(self) -> None:
        self.stop_calls += 1

    def emit(self, data: bytes) -> None:
        self.on_fragment(data)


@pytest.fixture
def fake_recognizer():
    return FakeRecognizer()


@pytest.fixture
def fake_recorder():
    return FakeRecorder()


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    audio_data = (wave_data * 32767 * 0.5).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_sample_size.return_value = 2

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config and return its path."""
    def write(content: str) -> str:
        path = tmp_path / "speechcoach.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)
    return write


@pytest.fixture
def recognizer_factory():
    """Build a FakeRecognizer with a custom start error."""
    return FakeRecognizer


@pytest.fixture
def recorder_factory():
    """Build a FakeRecorder with a custom start error."""
    return FakeRecorder
