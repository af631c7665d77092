"""LLM service for the generative-language API."""

import json
import logging
import re
from typing import Any

import httpx

from src.config import get_settings

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def extract_json(text: str) -> Any:
    """Parse JSON from a model reply that may wrap it in markdown or prose."""
    text = text.strip()
    match = _FENCED_JSON.search(text)
    if match:
        text = match.group(1)
    else:
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            text = text[start : end + 1]
    return json.loads(text)


class LLMService:
    """Service for calling the generateContent endpoint."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.gemini_base_url
        self.model = self.settings.llm_model
        self.api_key = self.settings.gemini_api_key
        self.timeout = 60.0

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.4,
        max_tokens: int = 1024,
    ) -> str:
        """Generate a text reply for a single prompt."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "temperature": temperature,
                        "maxOutputTokens": max_tokens,
                        "topP": 0.95,
                        "topK": 40,
                    },
                },
            )
            response.raise_for_status()
            data = response.json()

        candidates = data.get("candidates") or []
        if not candidates or not candidates[0].get("content"):
            raise ValueError("No content returned from the language model")
        parts = candidates[0]["content"].get("parts") or [{}]
        return parts[0].get("text", "")

    async def generate_json(
        self,
        prompt: str,
        temperature: float = 0.4,
    ) -> Any:
        """Generate structured JSON response from the LLM."""
        try:
            result = await self.generate(prompt=prompt, temperature=temperature)
            return extract_json(result)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse LLM response as JSON: {e}")
            logger.warning(f"Raw response: {result if 'result' in locals() else 'N/A'}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling the language model: {e}")
            raise
