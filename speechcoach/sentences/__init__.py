"""Practice sentence generation and categorisation."""

from .categories import categorize_sentence
from .generator import SentenceGenerator, parse_generated_sentences

__all__ = [
    "categorize_sentence",
    "SentenceGenerator",
    "parse_generated_sentences",
]
