"""Accumulation of final and interim recognition text."""

from typing import List


class TranscriptAccumulator:
    """Finalized fragments plus the current interim fragment.

    Finalized fragments are never revised. The interim fragment is replaced
    on every update and never becomes part of the final text on its own.
    """

    def __init__(self):
        self.finals: List[str] = []
        self.interim = ""

    def reset(self) -> None:
        self.finals = []
        self.interim = ""

    def add_final(self, text: str) -> None:
        text = text.strip()
        if text:
            self.finals.append(text)

    def set_interim(self, text: str) -> None:
        self.interim = text.strip()

    def final_text(self) -> str:
        """Trimmed concatenation of the finalized fragments."""
        return " ".join(self.finals).strip()

    def live_text(self) -> str:
        """Finalized text followed by the current interim text."""
        if not self.interim:
            return self.final_text()
        return " ".join(self.finals + [self.interim])
