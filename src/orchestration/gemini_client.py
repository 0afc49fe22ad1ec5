"""
Gemini (Google generative language API) wrapper for single-shot text generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from src.utils.config import gemini_api_key, gemini_generate_url, gemini_timeout
from src.utils.logger import get_logger

logger = get_logger()

NO_CONTENT_TEXT = "No content generated."
FALLBACK_TEXT = "Error: Unable to generate content. Please check the API key and network connection."


@dataclass(frozen=True)
class GenerationResult:
    """Generated text plus the failure description, if any.

    On failure `text` still holds FALLBACK_TEXT so callers that only display the
    text keep working; `error` lets callers tell a failure from real content.
    """

    text: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _first_text(data: Any) -> str | None:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text or None


class GeminiClient:
    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else gemini_api_key()
        self.url = url or gemini_generate_url()
        self.timeout = timeout if timeout is not None else gemini_timeout()

    def generate(self, prompt: str) -> GenerationResult:
        """POST the prompt once (no retry). Never raises."""
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            r = requests.post(
                self.url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            logger.warning("Gemini API call failed: %s", e)
            return GenerationResult(FALLBACK_TEXT, error=str(e))
        except ValueError as e:
            logger.warning("Gemini API returned invalid JSON: %s", e)
            return GenerationResult(FALLBACK_TEXT, error=f"invalid JSON: {e}")

        text = _first_text(data)
        if text is None:
            logger.info("Gemini returned no candidates")
            return GenerationResult(NO_CONTENT_TEXT)
        return GenerationResult(text)

    def generate_text(self, prompt: str) -> str:
        """Text only; failures come back as FALLBACK_TEXT."""
        return self.generate(prompt).text
