"""Unit tests for practice sentence generation."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from speechcoach.errors import SentenceGenerationError
from speechcoach.sentences import SentenceGenerator, categorize_sentence, parse_generated_sentences
from speechcoach.sentences.generator import build_generation_prompt

RESPONSE = """SENTENCE: We need to migrate the legacy database before the Q2 deadline.
TIPS: Slow down at "migrate". Pause after "deadline".

SENTENCE: Our client expects the new dashboard next week.
TIPS: Friendly tone, pause after "client".
TIPS: orphaned tips line
SENTENCE: Let's collaborate with the design team on this.
TIPS: Warm tone throughout.
"""


@pytest.mark.unit
class TestCategorizeSentence:

    @pytest.mark.parametrize("sentence, category", [
        ("The sprint milestone slipped", "project_update"),
        ("Our API gateway needs scaling", "technical"),
        ("The stakeholder asked for a demo", "client"),
        ("Let's plan the retrospective", "team"),
        ("We found a bug in checkout", "problem_solving"),
        ("Good morning everyone", "general"),
    ])
    def test_categories(self, sentence, category):
        assert categorize_sentence(sentence) == category

    def test_first_matching_category_wins(self):
        # Mentions both a deadline (project_update) and a database (technical)
        assert categorize_sentence("Database work before the deadline") == "project_update"


@pytest.mark.unit
class TestParseGeneratedSentences:

    def test_pairs_sentences_with_tips(self):
        today = date(2025, 3, 14)
        entries = parse_generated_sentences(RESPONSE, today)

        assert [e.sentence for e in entries] == [
            "We need to migrate the legacy database before the Q2 deadline.",
            "Our client expects the new dashboard next week.",
            "Let's collaborate with the design team on this.",
        ]
        assert entries[0].tips == 'Slow down at "migrate". Pause after "deadline".'
        assert [e.category for e in entries] == ["project_update", "client", "team"]
        assert all(e.date == today for e in entries)
        assert all(e.difficulty_level == "medium" for e in entries)

    def test_orphan_tips_are_ignored(self):
        entries = parse_generated_sentences("TIPS: nothing to attach to\nSENTENCE: Hi there.\n")
        assert entries == []

    def test_prompt_mentions_count(self):
        assert "Generate exactly 3 professional" in build_generation_prompt(3)


@pytest.mark.unit
class TestSentenceGenerator:

    def test_generate_returns_requested_count(self, run):
        client = AsyncMock()
        client.generate.return_value = RESPONSE

        entries = run(SentenceGenerator(client).generate(2, today=date(2025, 1, 2)))

        assert len(entries) == 2
        assert entries[0].date == date(2025, 1, 2)
        prompt = client.generate.call_args.args[0][0]["text"]
        assert "Generate exactly 2" in prompt

    def test_too_few_entries_raise(self, run):
        client = AsyncMock()
        client.generate.return_value = RESPONSE

        with pytest.raises(SentenceGenerationError, match="Only generated 3 entries, expected 10"):
            run(SentenceGenerator(client).generate(10))
