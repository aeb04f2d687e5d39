"""Prompt construction and response parsing for spoken delivery analysis."""

import re

from ..models.practice import AnalysisResult

DEFAULT_AI_SCORE = 75
AUDIO_ONLY_PLACEHOLDER = "(Audio Provided)"

_SCORE_RE = re.compile(r"SCORE:\s*(\d+)")
_FEEDBACK_RE = re.compile(r"FEEDBACK:\s*(.+)", re.DOTALL)

BUSINESS_GUIDANCE = """
This is BUSINESS COMMUNICATION practice. Focus on:
- Professional delivery and confidence
- Clear pronunciation of business/technical terms
- Appropriate pacing for professional settings (120-160 WPM ideal)
- Strategic pausing for emphasis
- Authoritative yet accessible tone"""

CUSTOM_GUIDANCE = {
    "presentation": """
This is a PRESENTATION practice. Focus on:
- Professional delivery and confidence
- Clear articulation for audience comprehension
- Strategic pausing for emphasis and audience engagement
- Pacing that maintains audience attention (not too fast, allows for processing)
- Authoritative but approachable tone""",
    "meeting": """
This is MEETING DIALOGUE practice. Focus on:
- Natural conversational flow
- Clear communication without being overly formal
- Appropriate pacing for discussion (allowing for interruption/response)
- Professional but accessible tone
- Key points articulated with clarity""",
    "speech": """
This is a FORMAL SPEECH practice. Focus on:
- Compelling delivery with emotional resonance
- Clear enunciation for larger audiences
- Dramatic pausing for effect
- Varied pacing to maintain engagement
- Confident, inspiring tone""",
    "conversation": """
This is CASUAL CONVERSATION practice. Focus on:
- Natural, relaxed delivery
- Conversational pacing (comfortable, not rushed)
- Authentic tone without over-formality
- Clear pronunciation while maintaining naturalness
- Engaging, friendly delivery""",
    "reading": """
This is READING/NARRATION practice. Focus on:
- Consistent, clear enunciation
- Appropriate pacing for comprehension
- Expression that brings the text to life
- Smooth flow without stumbling
- Engaging tone that maintains listener interest""",
}

CUSTOM_DEFAULT_GUIDANCE = """
This is GENERAL CUSTOM CONTENT practice. Focus on:
- Overall clarity and comprehension
- Natural delivery appropriate to the content
- Consistent pacing
- Clear pronunciation of key terms
- Confident, authentic expression"""

AUDIO_NOTE = """
(Audio provided for analysis)
Please estimate the speaking pace and delivery quality from the audio directly."""


def content_guidance(content_type: str, category: str = None) -> str:
    """Coaching focus for the kind of material being practiced."""
    if content_type == "custom":
        return CUSTOM_GUIDANCE.get(category, CUSTOM_DEFAULT_GUIDANCE)
    return BUSINESS_GUIDANCE


def build_analysis_prompt(original_text: str,
                          spoken_text: str,
                          has_audio: bool = False,
                          content_type: str = "business",
                          category: str = None) -> str:
    """Build the speech coach prompt comparing the spoken version to the original.

    Args:
        original_text: Text the user practiced
        spoken_text: Transcript of the attempt; empty when only audio is sent
        has_audio: Whether a recording accompanies the prompt
        content_type: "business" or "custom"
        category: Custom content category (presentation, meeting, ...)
    """
    spoken_text = spoken_text or AUDIO_ONLY_PLACEHOLDER
    audio_analysis = AUDIO_NOTE if has_audio else ""
    if spoken_text != AUDIO_ONLY_PLACEHOLDER:
        spoken_line = f'SPOKEN VERSION: "{spoken_text}"'
    else:
        spoken_line = "Note: Analyze the audio directly."

    base_instruction = (
        "You are an expert speech coach. LISTEN to the provided audio (if available) and analyze "
        "this practice session by comparing the spoken version against the original text.\n"
        f'\nORIGINAL TEXT: "{original_text}"\n'
        f"{spoken_line}\n"
        f"{audio_analysis}"
    )

    pace_note = "(measured WPM)" if has_audio else ""
    output_format = f"""
Provide your analysis in TWO parts:

1. SCORE (0-100): Rate overall performance based on:
   - Word accuracy (compare word-by-word: substitutions, omissions, additions)
   - Pronunciation clarity
   - Speaking pace {pace_note}
   - Delivery quality appropriate to the content type
   - Overall effectiveness
   Output format: "SCORE: XX"

2. FEEDBACK (4-5 sentences maximum): Provide structured, actionable feedback:

   a) ACCURACY: Identify specific word substitutions or errors. Be precise with examples.

   b) PRONUNCIATION: Point out 2-3 key words that need clearer pronunciation.

   c) PACE & DELIVERY: Comment on speaking speed and rhythm. Suggest improvements appropriate to the content type.

   d) STRENGTHS: Acknowledge one positive aspect (energy, flow, clarity, tone, etc.).

   e) ACTION ITEM: End with ONE specific practice tip for immediate improvement.

Output format:
SCORE: XX
FEEDBACK: [Your structured feedback covering accuracy, pronunciation, pace, strengths, and one action item]

Keep it concise (4-5 sentences), specific, and actionable."""

    return f"{base_instruction}{content_guidance(content_type, category)}{output_format}"


def parse_analysis(response_text: str) -> AnalysisResult:
    """Extract SCORE and FEEDBACK from the model response.

    A missing score falls back to DEFAULT_AI_SCORE; missing feedback falls
    back to the whole response. Scores are clamped to 0..100.
    """
    text = response_text.strip()
    score_match = _SCORE_RE.search(text)
    feedback_match = _FEEDBACK_RE.search(text)

    score = int(score_match.group(1)) if score_match else DEFAULT_AI_SCORE
    feedback = feedback_match.group(1).strip() if feedback_match else text
    return AnalysisResult(score=min(score, 100), feedback=feedback, raw_response=text)
