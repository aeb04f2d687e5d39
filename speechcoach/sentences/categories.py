"""Keyword-based categorisation of practice sentences."""

from typing import Dict, List

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "project_update": ["project", "sprint", "milestone", "deadline", "delivery", "timeline"],
    "technical": ["system", "architecture", "database", "api", "infrastructure", "deployment"],
    "client": ["client", "customer", "requirement", "feedback", "expectation", "stakeholder"],
    "team": ["team", "collaborate", "meeting", "standup", "retrospective", "planning"],
    "problem_solving": ["issue", "bug", "fix", "solution", "troubleshoot", "resolve"],
}
DEFAULT_CATEGORY = "general"


def categorize_sentence(sentence: str) -> str:
    """Return the first category with a keyword contained in the sentence."""
    lowered = sentence.lower()
    for category, words in CATEGORY_KEYWORDS.items():
        if any(word in lowered for word in words):
            return category
    return DEFAULT_CATEGORY
