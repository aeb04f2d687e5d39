"""SpeechCoach - speech practice with transcript accuracy scoring."""

__version__ = "0.1.0"
