"""Prompt construction and reply parsing for card generation."""

import json
import re

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from flashdeck.domain.constants import MAX_SOURCE_TEXT_LEN
from flashdeck.domain.errors import GenerationError
from flashdeck.domain.models import GeneratedCard


class GeneratedCardPayload(BaseModel):
    front: str
    back: str


_payload_list = TypeAdapter(list[GeneratedCardPayload])

# Models sometimes wrap JSON in a ```json fence despite the mime type.
_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def topic_prompt(topic: str, count: int, instructions: str | None = None) -> str:
    prompt = (
        f'Create {count} flashcards for studying the topic: "{topic}".\n'
        "The 'front' should be a question, term, or concept.\n"
        "The 'back' should be the answer, definition, or explanation.\n"
        "Make them suitable for spaced repetition learning (concise and clear).\n"
    )
    if instructions:
        prompt += f'\nIMPORTANT - Follow these specific user instructions: "{instructions}"\n'
    return prompt


def text_prompt(text: str, count: int, instructions: str | None = None) -> str:
    prompt = (
        "Extract key concepts from the following text and convert them into flashcards.\n"
        f"Create exactly {count} cards if possible.\n"
    )
    if instructions:
        prompt += f'\nUser instructions for extraction style/focus: "{instructions}"\n'
    prompt += f'\nText:\n"{text[:MAX_SOURCE_TEXT_LEN]}"\n'
    return prompt


def words_prompt(words: str, instructions: str | None = None) -> str:
    prompt = (
        "I have a list of words. Please create a flashcard for each word.\n\n"
        "Default instructions:\n"
        "1. 'front': The word itself.\n"
        "2. 'back': A clear definition, synonym, or explanation of the word. "
        "You can also include an example sentence in parentheses.\n"
    )
    if instructions:
        prompt += (
            f'\nAdditional user instructions (override defaults if conflicting): "{instructions}"\n'
        )
    prompt += f'\nWords:\n"{words}"\n'
    return prompt


def parse_generated_cards(reply: str | None) -> list[GeneratedCard]:
    """
    Parse a model reply holding a JSON array of {front, back} objects.

    An empty reply yields no cards. Entries with blank text are dropped.

    Raises:
        GenerationError: If the reply is not such an array.
    """
    if not reply or not reply.strip():
        return []

    match = _FENCE.match(reply)
    raw = match.group(1) if match else reply

    try:
        payloads = _payload_list.validate_python(json.loads(raw))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise GenerationError(f"Unexpected reply from generation service: {e}") from e

    return [
        GeneratedCard(front=p.front.strip(), back=p.back.strip())
        for p in payloads
        if p.front.strip() and p.back.strip()
    ]
