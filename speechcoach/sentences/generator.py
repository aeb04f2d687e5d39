"""Daily practice sentence generation with Gemini."""

import logging
from datetime import date
from typing import List, Optional

from ..analysis.gemini_client import GeminiClient, text_part
from ..errors import SentenceGenerationError
from ..models.practice import PracticeSentence
from .categories import categorize_sentence

logger = logging.getLogger(__name__)

DEFAULT_SENTENCE_COUNT = 10


def build_generation_prompt(count: int = DEFAULT_SENTENCE_COUNT) -> str:
    return f"""Generate exactly {count} professional IT business communication sentences with improvement tips for practicing speech delivery.

Each entry should have:
1. A sentence (45 to 75 words long, natural IT business context with multiple clauses)
2. Specific improvement tips for tone, speed, and pauses

Format each entry exactly like this:
SENTENCE: [the actual sentence]
TIPS: [specific guidance on tone, speed, and where to pause]

Example:
SENTENCE: We need to migrate the legacy database to PostgreSQL before the Q2 deadline to ensure better performance.
TIPS: Slow down at "migrate" and "PostgreSQL". Pause after "deadline". Use confident tone for the deadline, friendly tone for team benefit.

Generate {count} different entries covering: project updates, technical explanations, client communications, team collaboration, problem-solving, and status reports.

Return ONLY the {count} entries in the format shown above. No extra text."""


def parse_generated_sentences(text: str, today: Optional[date] = None) -> List[PracticeSentence]:
    """Pair SENTENCE:/TIPS: lines into practice sentences.

    A TIPS line without a preceding SENTENCE line is ignored.
    """
    entries = []
    current_sentence = ""
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("SENTENCE:"):
            current_sentence = line[len("SENTENCE:"):].strip()
        elif line.startswith("TIPS:"):
            tips = line[len("TIPS:"):].strip()
            if current_sentence and tips:
                entries.append(PracticeSentence(
                    sentence=current_sentence,
                    tips=tips,
                    category=categorize_sentence(current_sentence),
                    date=today,
                ))
                current_sentence = ""
    return entries


class SentenceGenerator:
    """Generates the day's practice sentences."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def generate(self, count: int = DEFAULT_SENTENCE_COUNT,
                       today: Optional[date] = None) -> List[PracticeSentence]:
        """Generate count practice sentences with tips.

        Raises:
            SentenceGenerationError: If fewer than count entries come back
        """
        today = today or date.today()
        logger.info(f"Generating {count} practice sentences for {today.isoformat()}")

        response_text = await self.client.generate([text_part(build_generation_prompt(count))])
        entries = parse_generated_sentences(response_text, today)
        logger.info(f"Generated {len(entries)} sentence-tip pairs")

        if len(entries) < count:
            raise SentenceGenerationError(f"Only generated {len(entries)} entries, expected {count}")
        return entries[:count]
