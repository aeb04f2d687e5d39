"""AI delivery analysis through the Gemini API."""

from .gemini_client import GeminiClient
from .prompts import build_analysis_prompt, parse_analysis
from .analyzer import SpeechAnalyzer, validate_analysis_request

__all__ = [
    "GeminiClient",
    "build_analysis_prompt",
    "parse_analysis",
    "SpeechAnalyzer",
    "validate_analysis_request",
]
