"""
Ports (interfaces) for persistence and card generation.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card, Deck, DeletedCard, GeneratedCard


class DeckStore(ABC):
    """
    Port for the deck collection and its trash.

    Implementations:
        - MemoryDeckStore: dict-backed, process lifetime only.
        - JsonDeckStore: one JSON document on disk, rewritten on every change.
    """

    @abstractmethod
    def list_decks(self) -> list[Deck]:
        """Return all decks in creation order."""
        pass

    @abstractmethod
    def get_deck(self, deck_id: str) -> Deck | None:
        pass

    @abstractmethod
    def save_deck(self, deck: Deck) -> None:
        """Insert or replace a deck by id (cards included)."""
        pass

    @abstractmethod
    def delete_deck(self, deck_id: str) -> bool:
        pass

    @abstractmethod
    def get_cards(self, deck_id: str) -> list[Card]:
        """
        Return every card of a deck, in stored order.

        Due filtering is the caller's job; the store hands back everything.
        """
        pass

    @abstractmethod
    def update_card(self, deck_id: str, card: Card) -> bool:
        """
        Replace the card with the same id. Last writer wins.

        Returns:
            False when the deck or card does not exist; nothing is appended.
        """
        pass

    @abstractmethod
    def append_card(self, deck_id: str, card: Card) -> None:
        pass

    @abstractmethod
    def remove_card(self, deck_id: str, card_id: str) -> Card | None:
        pass

    @abstractmethod
    def list_trash(self) -> list[DeletedCard]:
        """Return trash entries, most recently deleted first."""
        pass

    @abstractmethod
    def save_trash(self, items: list[DeletedCard]) -> None:
        pass


class CardGenerator(ABC):
    """
    Port for the external text-generation service.

    Implementations:
        - GeminiCardGenerator: Google Gemini REST API.
    """

    @abstractmethod
    async def generate_from_topic(
        self, topic: str, count: int, instructions: str | None = None
    ) -> list[GeneratedCard]:
        pass

    @abstractmethod
    async def generate_from_text(
        self, text: str, count: int, instructions: str | None = None
    ) -> list[GeneratedCard]:
        pass

    @abstractmethod
    async def generate_from_words(
        self, words: str, instructions: str | None = None
    ) -> list[GeneratedCard]:
        pass

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None
