"""AI analysis of a recorded practice attempt."""

import base64
import io
import logging
import wave
from typing import Optional, Tuple

from ..errors import AnalysisRequestError
from ..models.practice import AnalysisResult
from ..scoring import MAX_TEXT_LENGTH
from .gemini_client import GeminiClient, audio_part, text_part
from .prompts import build_analysis_prompt, parse_analysis

logger = logging.getLogger(__name__)

# Base64 payload limit (~3.75MB of raw audio)
MAX_AUDIO_BASE64_LENGTH = 5 * 1024 * 1024
RAW_PCM_MIME_TYPE = "audio/L16"


def validate_analysis_request(original_text: str,
                              spoken_text: Optional[str],
                              audio_base64: Optional[str]) -> None:
    """Reject requests the analysis service would refuse.

    Raises:
        AnalysisRequestError: With the reason the request is invalid
    """
    if not original_text:
        raise AnalysisRequestError("Missing required fields: originalText")
    if not spoken_text and not audio_base64:
        raise AnalysisRequestError("Missing input: provide spokenText or audioBase64")
    if (spoken_text and len(spoken_text) > MAX_TEXT_LENGTH) or len(original_text) > MAX_TEXT_LENGTH:
        raise AnalysisRequestError(f"Text too long. Maximum {MAX_TEXT_LENGTH} characters.")
    if audio_base64 and len(audio_base64) > MAX_AUDIO_BASE64_LENGTH:
        raise AnalysisRequestError("Audio file too large. Maximum 5MB.")


def pcm_to_wav(pcm: bytes, sample_rate: int = 16000, channels: int = 1) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


def encode_audio(audio: bytes, mime_type: Optional[str], sample_rate: int = 16000) -> Tuple[str, str]:
    """Base64-encode a recording in a container the model accepts.

    Returns:
        Tuple of (base64 data, mime type)
    """
    if not mime_type or mime_type.startswith(RAW_PCM_MIME_TYPE):
        audio = pcm_to_wav(audio, sample_rate)
        mime_type = "audio/wav"
    return base64.b64encode(audio).decode("ascii"), mime_type


class SpeechAnalyzer:
    """Scores delivery and writes coaching feedback with Gemini."""

    def __init__(self, client: GeminiClient, sample_rate: int = 16000):
        self.client = client
        self.sample_rate = sample_rate

    async def analyze(self,
                      spoken_text: Optional[str],
                      original_text: str,
                      audio: Optional[bytes] = None,
                      mime_type: Optional[str] = None,
                      content_type: str = "business",
                      category: Optional[str] = None) -> AnalysisResult:
        """Analyze a practice attempt.

        Args:
            spoken_text: Transcript of the attempt (may be empty if audio is given)
            original_text: The text that was practiced
            audio: Recorded audio, or None when recording was unavailable
            mime_type: MIME type of audio
            content_type: "business" or "custom"
            category: Custom content category

        Returns:
            AnalysisResult with the AI score and feedback

        Raises:
            AnalysisRequestError: If the request is invalid
            AnalysisServiceError: If the AI service fails
        """
        audio_base64 = None
        audio_mime = None
        if audio:
            audio_base64, audio_mime = encode_audio(audio, mime_type, self.sample_rate)
        else:
            logger.warning("No audio provided for AI analysis. Sending text only.")

        validate_analysis_request(original_text, spoken_text, audio_base64)

        prompt = build_analysis_prompt(
            original_text,
            spoken_text or "",
            has_audio=audio_base64 is not None,
            content_type=content_type,
            category=category,
        )
        parts = [text_part(prompt)]
        if audio_base64:
            parts.append(audio_part(audio_base64, audio_mime))

        logger.info(f"Requesting AI analysis ({content_type}/{category}, audio={audio_base64 is not None})")
        response_text = await self.client.generate(parts)
        result = parse_analysis(response_text)
        logger.info(f"AI score: {result.score}, feedback length: {len(result.feedback)}")
        return result
