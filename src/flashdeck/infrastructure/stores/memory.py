"""
In-memory deck store.

Keeps decks in insertion order and hands out copies, so nothing a caller does
to a returned Deck or Card leaks back into the store without an explicit call.
"""

import copy
import logging

from flashdeck.domain.models import Card, Deck, DeletedCard
from flashdeck.domain.ports import DeckStore

logger = logging.getLogger(__name__)


class MemoryDeckStore(DeckStore):
    def __init__(self, decks: list[Deck] | None = None, trash: list[DeletedCard] | None = None):
        self._decks: dict[str, Deck] = {d.id: copy.deepcopy(d) for d in decks or []}
        self._trash: list[DeletedCard] = list(trash or [])

    def _before_change(self) -> None:
        """Hook run right before a mutation; subclasses may refuse it by raising."""

    def _changed(self) -> None:
        """Hook for subclasses that persist after each mutation."""

    def list_decks(self) -> list[Deck]:
        return [copy.deepcopy(d) for d in self._decks.values()]

    def get_deck(self, deck_id: str) -> Deck | None:
        deck = self._decks.get(deck_id)
        return copy.deepcopy(deck) if deck else None

    def save_deck(self, deck: Deck) -> None:
        self._before_change()
        self._decks[deck.id] = copy.deepcopy(deck)
        self._changed()

    def delete_deck(self, deck_id: str) -> bool:
        if deck_id not in self._decks:
            return False
        self._before_change()
        del self._decks[deck_id]
        self._changed()
        return True

    def get_cards(self, deck_id: str) -> list[Card]:
        deck = self._decks.get(deck_id)
        return [copy.deepcopy(c) for c in deck.cards] if deck else []

    def update_card(self, deck_id: str, card: Card) -> bool:
        deck = self._decks.get(deck_id)
        if deck is None:
            return False
        for i, existing in enumerate(deck.cards):
            if existing.id == card.id:
                self._before_change()
                deck.cards[i] = copy.deepcopy(card)
                self._changed()
                return True
        return False

    def append_card(self, deck_id: str, card: Card) -> None:
        deck = self._decks.get(deck_id)
        if deck is None:
            logger.warning(f"Cannot append card {card.id}: deck {deck_id} does not exist")
            return
        self._before_change()
        deck.cards.append(copy.deepcopy(card))
        self._changed()

    def remove_card(self, deck_id: str, card_id: str) -> Card | None:
        deck = self._decks.get(deck_id)
        if deck is None:
            return None
        card = deck.find_card(card_id)
        if card is None:
            return None
        self._before_change()
        deck.cards = [c for c in deck.cards if c.id != card_id]
        self._changed()
        return copy.deepcopy(card)

    def list_trash(self) -> list[DeletedCard]:
        return list(self._trash)

    def save_trash(self, items: list[DeletedCard]) -> None:
        self._before_change()
        self._trash = list(items)
        self._changed()
