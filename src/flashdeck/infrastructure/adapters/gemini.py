import logging
from typing import Any

import httpx

from flashdeck.application.prompts import (
    parse_generated_cards,
    text_prompt,
    topic_prompt,
    words_prompt,
)
from flashdeck.domain.constants import DEFAULT_GEMINI_MODEL, DEFAULT_GEMINI_URL, REQUEST_TIMEOUT
from flashdeck.domain.errors import GenerationError
from flashdeck.domain.models import GeneratedCard
from flashdeck.domain.ports import CardGenerator

CARD_LIST_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "front": {"type": "STRING", "description": "The term or question"},
            "back": {"type": "STRING", "description": "The definition or answer"},
        },
        "required": ["front", "back"],
        "propertyOrdering": ["front", "back"],
    },
}


class GeminiCardGenerator(CardGenerator):
    """Adapter for generating cards with Google Gemini over its REST API."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_GEMINI_MODEL,
        url: str = DEFAULT_GEMINI_URL,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.api_key = api_key
        self.model = model
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.url}/models/{self.model}:generateContent"

    async def generate_from_topic(
        self, topic: str, count: int, instructions: str | None = None
    ) -> list[GeneratedCard]:
        return await self._generate(topic_prompt(topic, count, instructions))

    async def generate_from_text(
        self, text: str, count: int, instructions: str | None = None
    ) -> list[GeneratedCard]:
        return await self._generate(text_prompt(text, count, instructions))

    async def generate_from_words(
        self, words: str, instructions: str | None = None
    ) -> list[GeneratedCard]:
        return await self._generate(words_prompt(words, instructions))

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _generate(self, prompt: str) -> list[GeneratedCard]:
        if not self.api_key:
            raise GenerationError(
                "API key is missing. Set FLASHDECK_GEMINI_API_KEY or gemini_api_key in config."
            )
        return parse_generated_cards(await self._invoke(prompt))

    async def _invoke(self, prompt: str) -> str | None:
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": CARD_LIST_SCHEMA,
            },
        }
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self.timeout)

            resp = await self._client.post(
                self.endpoint,
                json=payload,
                headers={"x-goog-api-key": self.api_key or ""},
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"Gemini call failed: {e}")
            raise GenerationError(f"Error contacting the generation service: {e}") from e

        candidates = data.get("candidates") or []
        if not candidates:
            self.logger.warning(f"Gemini returned no candidates: {data.get('error')}")
            return None

        parts = candidates[0].get("content", {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts) or None
