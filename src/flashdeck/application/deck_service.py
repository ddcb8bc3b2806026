"""
Deck service, the application layer orchestrator.

Coordinates deck and card edits, the trash, and study sessions on top of a
DeckStore. Follows Dependency Inversion: depends on the DeckStore port,
not on a concrete store.
"""

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from flashdeck.application.id_service import create_new_card, create_new_deck
from flashdeck.application.scheduler import is_due, new_scheduling_state, now_ms
from flashdeck.application.session import StudySession
from flashdeck.domain.constants import (
    RESTORED_DECK_DESCRIPTION,
    RESTORED_DECK_ID,
    RESTORED_DECK_NAME,
)
from flashdeck.domain.errors import NotFoundError, ValidationError
from flashdeck.domain.models import Card, Deck, DeletedCard
from flashdeck.domain.ports import DeckStore

logger = logging.getLogger(__name__)


@dataclass
class DeckSummary:
    deck_id: str
    name: str
    total: int
    due: int


def _require_text(value: str, what: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{what} must not be empty")
    return value


class DeckService:
    def __init__(self, store: DeckStore):
        self._store = store

    # ---------- Decks ----------

    def list_decks(self) -> list[Deck]:
        return self._store.list_decks()

    def get_deck(self, deck_id: str) -> Deck:
        deck = self._store.get_deck(deck_id)
        if deck is None:
            raise NotFoundError(f"Deck '{deck_id}' not found")
        return deck

    def create_deck(self, name: str, description: str = "") -> Deck:
        deck = create_new_deck(_require_text(name, "Deck name"), (description or "").strip())
        self._store.save_deck(deck)
        logger.info(f"Created deck '{deck.name}' ({deck.id})")
        return deck

    def edit_deck(self, deck_id: str, name: str, description: str = "") -> Deck:
        deck = self.get_deck(deck_id)
        edited = replace(
            deck, name=_require_text(name, "Deck name"), description=(description or "").strip()
        )
        self._store.save_deck(edited)
        return edited

    def delete_deck(self, deck_id: str) -> None:
        """Remove a deck outright. Its cards do not go to the trash."""
        if not self._store.delete_deck(deck_id):
            raise NotFoundError(f"Deck '{deck_id}' not found")
        logger.info(f"Deleted deck {deck_id}")

    def due_count(self, deck_id: str, at_ms: int | None = None) -> int:
        at_ms = now_ms() if at_ms is None else at_ms
        return sum(1 for card in self.get_deck(deck_id).cards if is_due(card, at_ms))

    def deck_summaries(self, at_ms: int | None = None) -> list[DeckSummary]:
        at_ms = now_ms() if at_ms is None else at_ms
        return [
            DeckSummary(
                deck_id=deck.id,
                name=deck.name,
                total=len(deck.cards),
                due=sum(1 for card in deck.cards if is_due(card, at_ms)),
            )
            for deck in self._store.list_decks()
        ]

    # ---------- Cards ----------

    def add_card(self, deck_id: str, front: str, back: str) -> Card:
        self.get_deck(deck_id)
        card = create_new_card(_require_text(front, "Front"), _require_text(back, "Back"))
        self._store.append_card(deck_id, card)
        return card

    def add_cards(self, deck_id: str, pairs: Iterable[tuple[str, str]]) -> list[Card]:
        self.get_deck(deck_id)
        cards = [
            create_new_card(_require_text(front, "Front"), _require_text(back, "Back"))
            for front, back in pairs
        ]
        for card in cards:
            self._store.append_card(deck_id, card)
        logger.info(f"Added {len(cards)} cards to deck {deck_id}")
        return cards

    def get_card(self, deck_id: str, card_id: str) -> Card:
        card = self.get_deck(deck_id).find_card(card_id)
        if card is None:
            raise NotFoundError(f"Card '{card_id}' not found in deck '{deck_id}'")
        return card

    def edit_card(self, deck_id: str, card_id: str, front: str, back: str) -> Card:
        """Change the text of a card; its schedule is left alone."""
        card = self.get_card(deck_id, card_id)
        edited = replace(card, front=_require_text(front, "Front"), back=_require_text(back, "Back"))
        self._store.update_card(deck_id, edited)
        return edited

    def update_card(self, deck_id: str, card: Card) -> None:
        if not self._store.update_card(deck_id, card):
            logger.warning(f"Update ignored: card {card.id} is not in deck {deck_id}")

    def reset_card(self, deck_id: str, card_id: str) -> Card:
        """Give a card a fresh schedule and bring it back into study."""
        card = self.get_card(deck_id, card_id)
        reset = replace(card.with_scheduling(new_scheduling_state()), is_done=False)
        self._store.update_card(deck_id, reset)
        return reset

    # ---------- Trash ----------

    def delete_card(self, deck_id: str, card_id: str) -> DeletedCard:
        """Soft delete: move the card to the front of the trash."""
        deck = self.get_deck(deck_id)
        card = self._store.remove_card(deck_id, card_id)
        if card is None:
            raise NotFoundError(f"Card '{card_id}' not found in deck '{deck_id}'")

        entry = DeletedCard(
            card=card,
            origin_deck_id=deck.id,
            origin_deck_name=deck.name,
            deleted_at=now_ms(),
        )
        self._store.save_trash([entry, *self._store.list_trash()])
        return entry

    def list_trash(self, deck_id: str | None = None) -> list[DeletedCard]:
        trash = self._store.list_trash()
        if deck_id is None:
            return trash
        return [item for item in trash if item.origin_deck_id == deck_id]

    def restore_card(self, card_id: str) -> Deck:
        """
        Put a trashed card back in its deck.

        If the origin deck was deleted meanwhile, the card goes to a shared
        "Restored Cards" deck, created on first use.

        Returns:
            The deck the card landed in.
        """
        trash = self._store.list_trash()
        entry = self._find_trash_entry(trash, card_id)

        target = self._store.get_deck(entry.origin_deck_id)
        if target is None:
            target = self._store.get_deck(RESTORED_DECK_ID)
            if target is None:
                target = Deck(
                    id=RESTORED_DECK_ID,
                    name=RESTORED_DECK_NAME,
                    description=RESTORED_DECK_DESCRIPTION,
                    created_at=now_ms(),
                )
                self._store.save_deck(target)
            logger.info(f"Origin deck {entry.origin_deck_id} is gone; restoring to {target.id}")

        self._store.append_card(target.id, entry.card)
        self._store.save_trash([item for item in trash if item.card.id != card_id])
        return self.get_deck(target.id)

    def purge(self, card_id: str) -> None:
        trash = self._store.list_trash()
        self._find_trash_entry(trash, card_id)
        self._store.save_trash([item for item in trash if item.card.id != card_id])

    @staticmethod
    def _find_trash_entry(trash: list[DeletedCard], card_id: str) -> DeletedCard:
        for item in trash:
            if item.card.id == card_id:
                return item
        raise NotFoundError(f"Card '{card_id}' is not in the trash")

    # ---------- Study ----------

    def start_session(
        self,
        deck_id: str,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> StudySession:
        """Start a session over the deck's currently due cards."""
        cards = self._store.get_cards(self.get_deck(deck_id).id)
        session = StudySession(
            cards,
            on_update=lambda card: self.update_card(deck_id, card),
            clock=clock,
            rng=rng,
            on_complete=on_complete,
        )
        session.start()
        logger.info(f"Study session on deck {deck_id}: {len(session.queue)} due cards")
        return session
