"""Text-to-speech playback of practice sentences."""

from .voices import GTTS_VOICES, Voice, select_best_voice
from .synthesizer import DecodedAudio, GTTSSynthesizer
from .player import PlaybackHandle, SpeechPlayer

__all__ = [
    "GTTS_VOICES",
    "Voice",
    "select_best_voice",
    "DecodedAudio",
    "GTTSSynthesizer",
    "PlaybackHandle",
    "SpeechPlayer",
]
