"""Terminal practice view with a live transcript panel."""

import logging
import threading
from typing import Optional

from pubsub import pub
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..capture.publisher import TRANSCRIPT_TOPIC
from ..errors import CaptureError
from ..models.capture import TranscriptUpdate
from ..models.practice import AnalysisResult
from ..models.scoring import ScoreResult

logger = logging.getLogger(__name__)


def score_style(score: int) -> str:
    if score >= 90:
        return "bold green"
    if score >= 70:
        return "bold yellow"
    return "bold red"


class PracticeView:
    """Shows the sentence being practiced and the transcript as it arrives."""

    def __init__(self, reference: str, console: Optional[Console] = None, topic: str = TRANSCRIPT_TOPIC):
        self.reference = reference
        self.console = console or Console()
        self.topic = topic
        self.transcript = ""
        self.is_final = False
        self.lock = threading.Lock()
        self.live: Optional[Live] = None

    def __enter__(self):
        pub.subscribe(self._on_update, self.topic)
        self.live = Live(self._render(), console=self.console, refresh_per_second=10)
        self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            pub.unsubscribe(self._on_update, self.topic)
        finally:
            if self.live is not None:
                self.live.__exit__(exc_type, exc_val, exc_tb)
                self.live = None

    def _on_update(self, update: TranscriptUpdate) -> None:
        with self.lock:
            self.transcript = update.transcript
            self.is_final = update.is_final
        if self.live is not None:
            self.live.update(self._render())

    def _render(self) -> Group:
        with self.lock:
            transcript = self.transcript
            is_final = self.is_final
        heard = Text(transcript or "Listening...", style="white" if is_final else "italic cyan")
        return Group(
            Panel(Text(self.reference, style="bold"), title="Read aloud", border_style="blue"),
            Panel(heard, title="Heard", border_style="green" if is_final else "cyan"),
        )

    def show_error(self, error: CaptureError) -> None:
        self.console.print(f"❌ {error.message}", style="bold red")

    def show_score(self, result: ScoreResult, transcript: str) -> None:
        table = Table(show_header=False, box=None)
        table.add_row("Transcript", transcript or "(nothing heard)")
        table.add_row("Accuracy", Text(f"{result.score}%", style=score_style(result.score)))
        table.add_row("Edit distance", str(result.distance))
        self.console.print(Panel(table, title="Result", border_style="green"))

    def show_analysis(self, analysis: AnalysisResult) -> None:
        body = Group(
            Text(f"AI score: {analysis.score}", style=score_style(analysis.score)),
            Text(analysis.feedback),
        )
        self.console.print(Panel(body, title="Coach feedback", border_style="magenta"))
