"""Gemini generateContent client for delivery analysis and sentence generation."""

import asyncio
import json
import logging
from typing import Any, Dict, List

import aiohttp

from ..errors import AnalysisServiceError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.5-flash"


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def audio_part(data_base64: str, mime_type: str) -> Dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data_base64}}


def _status_message(status: int, error_text: str) -> str:
    """User-facing message for a failed Gemini call."""
    if status == 400:
        return "Invalid request to AI service. Please check your input."
    if status in (401, 403):
        return "Invalid or expired Gemini API key. Please update your API key in Settings."
    if status == 429:
        return "API rate limit exceeded. Please try again later or check your Gemini API quota."

    message = "AI analysis service unavailable. Please try again later."
    try:
        detail = json.loads(error_text).get("error", {}).get("message")
    except (ValueError, AttributeError):
        detail = None
    return f"{message} ({detail or error_text[:100]})"


class GeminiClient:
    """Simple client for sending prompt parts to Gemini and getting text back."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = 60.0):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key
            model: Gemini model name
            timeout: Total request timeout in seconds
        """
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.url = f"{GEMINI_BASE_URL}/{model}:generateContent"

        logger.info(f"GeminiClient initialized with model: {model}")

    async def generate(self, parts: List[Dict[str, Any]]) -> str:
        """Send content parts to Gemini and return the response text.

        Args:
            parts: Content parts (text and inline audio)

        Returns:
            Text of the first candidate, stripped

        Raises:
            AnalysisServiceError: If the API call fails or the response is malformed
        """
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        body = {"contents": [{"parts": parts}]}

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, headers=headers, json=body) as response:
                    logger.debug(f"Gemini API response status: {response.status}")
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Gemini API error: {response.status} - {error_text}")
                        raise AnalysisServiceError(_status_message(response.status, error_text),
                                                   status=response.status)
                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Gemini API request failed: {e!r}")
            raise AnalysisServiceError("AI analysis service unavailable. Please try again later.") from e

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"].strip()
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected Gemini response structure: {json.dumps(data)[:500]}")
            raise AnalysisServiceError("Invalid response structure from Gemini API") from e
