"""
On-disk record shapes for the JSON deck store.

Keys are camelCase so a file matches the layout the browser app kept in
local storage (``easeFactor``, ``nextReviewDate``, ``isDone`` ...).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from flashdeck.domain.constants import INITIAL_EASE_FACTOR, STORE_FORMAT_VERSION
from flashdeck.domain.models import Card, Deck, DeletedCard, Rating


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CardRecord(_Record):
    id: str
    front: str
    back: str
    created_at: int
    interval: int = 0
    repetition: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    next_review_date: int = 0
    last_difficulty: Rating | None = None
    is_done: bool = False

    @classmethod
    def from_domain(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            created_at=card.created_at,
            interval=card.interval,
            repetition=card.repetition,
            ease_factor=card.ease_factor,
            next_review_date=card.next_review_date,
            last_difficulty=card.last_difficulty,
            is_done=card.is_done,
        )

    def to_domain(self) -> Card:
        return Card(**self.model_dump())


class DeckRecord(_Record):
    id: str
    name: str
    description: str = ""
    cards: list[CardRecord] = []
    created_at: int = 0

    @classmethod
    def from_domain(cls, deck: Deck) -> "DeckRecord":
        return cls(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            cards=[CardRecord.from_domain(c) for c in deck.cards],
            created_at=deck.created_at,
        )

    def to_domain(self) -> Deck:
        return Deck(
            id=self.id,
            name=self.name,
            description=self.description,
            cards=[c.to_domain() for c in self.cards],
            created_at=self.created_at,
        )


class DeletedCardRecord(_Record):
    card: CardRecord
    origin_deck_id: str
    origin_deck_name: str
    deleted_at: int

    @classmethod
    def from_domain(cls, item: DeletedCard) -> "DeletedCardRecord":
        return cls(
            card=CardRecord.from_domain(item.card),
            origin_deck_id=item.origin_deck_id,
            origin_deck_name=item.origin_deck_name,
            deleted_at=item.deleted_at,
        )

    def to_domain(self) -> DeletedCard:
        return DeletedCard(
            card=self.card.to_domain(),
            origin_deck_id=self.origin_deck_id,
            origin_deck_name=self.origin_deck_name,
            deleted_at=self.deleted_at,
        )


class StoreDocument(_Record):
    version: int = STORE_FORMAT_VERSION
    decks: list[DeckRecord] = []
    trash: list[DeletedCardRecord] = []
