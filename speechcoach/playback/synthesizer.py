"""Text-to-speech synthesis into raw PCM for playback."""

import io
import logging
from dataclasses import dataclass

from gtts import gTTS
from pydub import AudioSegment

from .voices import Voice

logger = logging.getLogger(__name__)


@dataclass
class DecodedAudio:
    """Raw PCM audio ready for an output stream."""
    pcm: bytes
    sample_rate: int
    channels: int = 1
    sample_width: int = 2  # bytes per sample


class GTTSSynthesizer:
    """Synthesizes speech with gTTS and decodes the MP3 with pydub."""

    def __init__(self, lang: str = "en", tld: str = "co.uk", slow: bool = False):
        """Initialize synthesizer.

        Args:
            lang: gTTS language code
            tld: Google domain selecting the accent ("co.uk" for British English)
            slow: Read more slowly
        """
        self.lang = lang
        self.tld = tld
        self.slow = slow

    @classmethod
    def for_voice(cls, voice: Voice, slow: bool = False) -> "GTTSSynthesizer":
        """Synthesizer reading with the accent of voice."""
        return cls(lang=voice.lang.split("-")[0], tld=voice.tld, slow=slow)

    def synthesize(self, text: str) -> DecodedAudio:
        """Synthesize text and return decoded PCM."""
        if not text.strip():
            raise ValueError("Cannot synthesize empty text")

        mp3 = io.BytesIO()
        gTTS(text=text, lang=self.lang, tld=self.tld, slow=self.slow).write_to_fp(mp3)
        mp3.seek(0)

        segment = AudioSegment.from_file(mp3, format="mp3")
        logger.debug(f"Synthesized {len(text)} chars into {len(segment)}ms of audio")
        return DecodedAudio(
            pcm=segment.raw_data,
            sample_rate=segment.frame_rate,
            channels=segment.channels,
            sample_width=segment.sample_width,
        )
