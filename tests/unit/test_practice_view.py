"""Unit tests for the rich practice view."""

import io

import pytest
from pubsub import pub
from rich.console import Console

from speechcoach.errors import CaptureError, CaptureErrorKind
from speechcoach.models.capture import TranscriptUpdate
from speechcoach.models.practice import AnalysisResult
from speechcoach.models.scoring import ScoreResult
from speechcoach.ui import PracticeView
from speechcoach.ui.practice_view import score_style


def make_console():
    return Console(file=io.StringIO(), force_terminal=False, width=100)


@pytest.mark.unit
class TestPracticeView:

    @pytest.mark.parametrize("score, style", [(100, "bold green"), (90, "bold green"),
                                              (75, "bold yellow"), (10, "bold red")])
    def test_score_style(self, score, style):
        assert score_style(score) == style

    def test_receives_updates_while_open(self):
        topic = "transcript_view_test"
        view = PracticeView("Hello team", console=make_console(), topic=topic)
        with view:
            pub.sendMessage(topic, update=TranscriptUpdate("hello", False))
            assert view.transcript == "hello"
            assert not view.is_final
            pub.sendMessage(topic, update=TranscriptUpdate("hello team", True))
            assert view.is_final

        # Unsubscribed after exit
        pub.sendMessage(topic, update=TranscriptUpdate("ignored", False))
        assert view.transcript == "hello team"

    def test_show_score_and_analysis(self):
        console = make_console()
        view = PracticeView("Hello team", console=console)
        view.show_score(ScoreResult(score=67, distance=1), "hello tram")
        view.show_analysis(AnalysisResult(score=80, feedback="Slow down on 'team'."))

        output = console.file.getvalue()
        assert "67%" in output
        assert "hello tram" in output
        assert "AI score: 80" in output
        assert "Slow down on 'team'." in output

    def test_show_error(self):
        console = make_console()
        PracticeView("x", console=console).show_error(CaptureError(CaptureErrorKind.PERMISSION_DENIED))
        assert "Microphone permission denied." in console.file.getvalue()
