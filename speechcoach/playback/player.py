"""Speech playback with an explicitly owned playback handle."""

import logging
from threading import Thread, Event
from typing import Optional

import pyaudio

from .synthesizer import DecodedAudio, GTTSSynthesizer

logger = logging.getLogger(__name__)


class PlaybackHandle:
    """One audio buffer playing on a PyAudio output stream."""

    def __init__(self, audio: DecodedAudio, chunk_frames: int = 1024):
        self.audio = audio
        self.chunk_frames = chunk_frames
        self.stop_event = Event()
        self.done_event = Event()
        self.playback_thread: Optional[Thread] = None

    @property
    def is_playing(self) -> bool:
        return self.playback_thread is not None and not self.done_event.is_set()

    def start(self) -> None:
        """Open the output device and play in a background thread."""
        self.playback_thread = Thread(target=self._play, daemon=True)
        self.playback_thread.name = "PlaybackThread"
        self.playback_thread.start()

    def stop(self) -> None:
        """Stop playback. Safe to call more than once."""
        self.stop_event.set()
        if self.playback_thread and self.playback_thread.is_alive():
            self.playback_thread.join(timeout=2.0)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for playback to finish. Returns False on timeout."""
        return self.done_event.wait(timeout)

    def _play(self) -> None:
        pyaudio_instance = None
        stream = None
        try:
            pyaudio_instance = pyaudio.PyAudio()
            stream = pyaudio_instance.open(
                format=pyaudio_instance.get_format_from_width(self.audio.sample_width),
                channels=self.audio.channels,
                rate=self.audio.sample_rate,
                output=True,
            )
            step = self.chunk_frames * self.audio.sample_width * self.audio.channels
            for offset in range(0, len(self.audio.pcm), step):
                if self.stop_event.is_set():
                    break
                stream.write(self.audio.pcm[offset:offset + step])
        except OSError as e:
            logger.error(f"Audio playback failed: {e}")
        finally:
            if stream is not None:
                stream.stop_stream()
                stream.close()
            if pyaudio_instance is not None:
                pyaudio_instance.terminate()
            self.done_event.set()


class SpeechPlayer:
    """Reads sentences aloud. Owns at most one playback at a time."""

    def __init__(self, synthesizer: Optional[GTTSSynthesizer] = None):
        self.synthesizer = synthesizer or GTTSSynthesizer()
        self.current: Optional[PlaybackHandle] = None

    def speak(self, text: str) -> PlaybackHandle:
        """Stop any current playback and read text aloud."""
        self.stop()
        return self.play(self.synthesizer.synthesize(text))

    def play(self, audio: DecodedAudio) -> PlaybackHandle:
        """Stop any current playback and play decoded audio."""
        self.stop()
        handle = PlaybackHandle(audio)
        self.current = handle
        handle.start()
        return handle

    def stop(self) -> None:
        """Stop the current playback, if any."""
        if self.current is not None:
            self.current.stop()
            self.current = None
