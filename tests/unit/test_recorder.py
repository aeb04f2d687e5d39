"""Unit tests for PyAudioRecorder."""

import threading
import time

import numpy as np
import pytest

from speechcoach.capture.recorder import PyAudioRecorder
from speechcoach.errors import AcquisitionError, CaptureErrorKind


@pytest.mark.unit
class TestPyAudioRecorder:
    """Test cases for PyAudioRecorder class."""

    def test_init(self):
        recorder = PyAudioRecorder(sample_rate=16000, chunk_size=512)
        assert recorder.sample_rate == 16000
        assert recorder.chunk_size == 512
        assert recorder.channels == 1
        assert not recorder.is_recording
        assert recorder.mime_type == "audio/L16"

    def test_records_fragments_until_stopped(self, mock_pyaudio):
        fragments = []
        lock = threading.Lock()

        def on_fragment(data):
            with lock:
                fragments.append(data)

        recorder = PyAudioRecorder()
        recorder.start(on_fragment, timeslice=0.01)
        assert recorder.is_recording
        time.sleep(0.1)
        recorder.stop()

        assert not recorder.is_recording
        assert fragments
        assert recorder.total_fragments == len(fragments)
        assert set(b"".join(fragments)) == {0}
        mock_pyaudio['stream'].stop_stream.assert_called_once()
        mock_pyaudio['stream'].close.assert_called_once()
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_remaining_buffer_flushed_on_stop(self, mock_pyaudio):
        fragments = []
        recorder = PyAudioRecorder()
        # Timeslice longer than the test: only the final flush emits
        recorder.start(fragments.append, timeslice=60.0)
        time.sleep(0.05)
        recorder.stop()

        assert len(fragments) == 1
        assert len(fragments[0]) % 2048 == 0

    def test_open_failure_is_no_device(self, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("Invalid input device")

        recorder = PyAudioRecorder()
        with pytest.raises(AcquisitionError) as exc_info:
            recorder.start(lambda data: None)

        assert exc_info.value.kind is CaptureErrorKind.NO_DEVICE
        assert not recorder.is_recording
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_stop_when_not_recording_is_noop(self, mock_pyaudio):
        PyAudioRecorder().stop()
        mock_pyaudio['class'].assert_not_called()

    def test_peak_level(self, sample_audio_chunk):
        recorder = PyAudioRecorder()
        recorder._update_peak(sample_audio_chunk)
        expected = np.abs(np.frombuffer(sample_audio_chunk, dtype=np.int16)).max() / 32768.0
        assert recorder.peak_level == pytest.approx(expected)
        assert 0.45 < recorder.peak_level < 0.55

    def test_pyaudio_init_failure_is_unsupported(self, mock_pyaudio):
        mock_pyaudio['class'].side_effect = OSError("no audio backend")

        with pytest.raises(AcquisitionError) as exc_info:
            PyAudioRecorder().start(lambda data: None)

        assert exc_info.value.kind is CaptureErrorKind.UNSUPPORTED
