"""Terminal views for SpeechCoach."""

from .practice_view import PracticeView

__all__ = ["PracticeView"]
