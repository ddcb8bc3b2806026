"""
Card generation service.

Turns a topic, a block of text, or a word list into new cards in a deck via
the CardGenerator port.
"""

import logging
from typing import Literal

from flashdeck.application.deck_service import DeckService
from flashdeck.domain.constants import DEFAULT_CARD_COUNT
from flashdeck.domain.errors import GenerationError, ValidationError
from flashdeck.domain.models import Card
from flashdeck.domain.ports import CardGenerator

logger = logging.getLogger(__name__)

GenerationMode = Literal["topic", "text", "words"]


class GenerationService:
    def __init__(self, generator: CardGenerator, decks: DeckService):
        self._generator = generator
        self._decks = decks

    async def generate(
        self,
        deck_id: str,
        mode: GenerationMode,
        source: str,
        count: int = DEFAULT_CARD_COUNT,
        instructions: str | None = None,
    ) -> list[Card]:
        """
        Generate cards and append them to a deck.

        Args:
            deck_id: Deck receiving the cards.
            mode: "topic", "text" or "words".
            source: The topic, the text to extract from, or the word list.
            count: Cards to ask for (ignored for "words": one per word).
            instructions: Optional extra guidance passed to the model.

        Returns:
            The newly added cards.

        Raises:
            ValidationError: Blank source, bad count or unknown mode.
            GenerationError: The service failed or produced no usable cards.
        """
        self._decks.get_deck(deck_id)

        source = (source or "").strip()
        if not source:
            raise ValidationError(f"Nothing to generate from: the {mode} is empty")
        if count < 1:
            raise ValidationError("Card count must be at least 1")
        instructions = (instructions or "").strip() or None

        if mode == "topic":
            generated = await self._generator.generate_from_topic(source, count, instructions)
        elif mode == "text":
            generated = await self._generator.generate_from_text(source, count, instructions)
        elif mode == "words":
            generated = await self._generator.generate_from_words(source, instructions)
        else:
            raise ValidationError(f"Unknown generation mode: {mode}")

        pairs = [(g.front, g.back) for g in generated if g.front.strip() and g.back.strip()]
        if not pairs:
            raise GenerationError("Could not generate cards. Please try a different prompt.")

        cards = self._decks.add_cards(deck_id, pairs)
        logger.info(f"Generated {len(cards)} cards ({mode}) for deck {deck_id}")
        return cards
