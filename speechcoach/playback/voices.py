"""Voice catalogue and best-voice selection for sentence read-aloud."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Voice:
    """A synthesis voice."""
    name: str
    lang: str  # BCP-47 tag, e.g. 'en-GB'
    tld: str = "com"  # gTTS Google domain that produces this accent


# Accents gTTS can produce for English
GTTS_VOICES: List[Voice] = [
    Voice("Google UK English", "en-GB", "co.uk"),
    Voice("Google US English", "en-US", "com"),
    Voice("Google Australian English", "en-AU", "com.au"),
    Voice("Google Canadian English", "en-CA", "ca"),
    Voice("Google Indian English", "en-IN", "co.in"),
    Voice("Google Irish English", "en-IE", "ie"),
]


def _name_has(*words: str) -> Callable[[Voice], bool]:
    return lambda v: any(word in v.name for word in words)


VOICE_PRIORITY: List[Callable[[Voice], bool]] = [
    _name_has("Premium", "Enhanced", "Natural"),
    _name_has("Google"),
    _name_has("Samantha"),
    _name_has("Microsoft"),
    lambda v: v.lang == "en-GB" and _name_has("Male", "Daniel", "George")(v),
    lambda v: v.lang == "en-GB" and _name_has("Female", "Kate", "Serena")(v),
    lambda v: v.lang == "en-GB",
    lambda v: v.lang == "en-US" and _name_has("Male", "David", "Mark")(v),
    lambda v: v.lang == "en-US" and _name_has("Female", "Zira", "Samantha")(v),
    lambda v: v.lang == "en-US",
]


def select_best_voice(voices: List[Voice]) -> Optional[Voice]:
    """Pick the most natural-sounding English voice.

    Args:
        voices: Available voices, in platform order

    Returns:
        The first English voice matching the highest-priority rule, the
        first English voice if no rule matches, the first voice if none is
        English, or None for an empty list
    """
    if not voices:
        return None

    english = [v for v in voices if v.lang.startswith("en")]
    if not english:
        return voices[0]

    for matches in VOICE_PRIORITY:
        for voice in english:
            if matches(voice):
                logger.debug(f"Selected voice: {voice.name} {voice.lang}")
                return voice
    return english[0]
