"""
Domain models for decks, cards and their scheduling state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .constants import INITIAL_EASE_FACTOR


class Rating(str, Enum):
    """Self-assessed recall difficulty. Values are the persisted form."""

    AGAIN = "Again"  # Failed, review immediately
    HARD = "Hard"  # Difficult, review soon
    GOOD = "Good"  # Normal, standard interval
    EASY = "Easy"  # Very easy, long interval


@dataclass(frozen=True)
class SchedulingState:
    """
    The scheduling subset of a card.

    Attributes:
        interval: Days until due, counted from the last review.
        repetition: Consecutive non-failing ratings.
        ease_factor: Multiplier nudged by HARD/EASY, never below 1.3.
        next_review_date: Epoch milliseconds when the card becomes due.
        last_difficulty: Most recent rating; display only.
    """

    interval: int = 0
    repetition: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    next_review_date: int = 0
    last_difficulty: Rating | None = None


@dataclass
class Card:
    id: str
    front: str
    back: str
    created_at: int  # epoch ms

    # Scheduling
    interval: int = 0
    repetition: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    next_review_date: int = 0
    last_difficulty: Rating | None = None
    is_done: bool = False

    @property
    def scheduling(self) -> SchedulingState:
        return SchedulingState(
            interval=self.interval,
            repetition=self.repetition,
            ease_factor=self.ease_factor,
            next_review_date=self.next_review_date,
            last_difficulty=self.last_difficulty,
        )

    def with_scheduling(self, state: SchedulingState) -> "Card":
        """Return a copy carrying the given scheduling state; id and text are kept."""
        return replace(
            self,
            interval=state.interval,
            repetition=state.repetition,
            ease_factor=state.ease_factor,
            next_review_date=state.next_review_date,
            last_difficulty=state.last_difficulty,
        )


@dataclass
class Deck:
    id: str
    name: str
    description: str = ""
    cards: list[Card] = field(default_factory=list)
    created_at: int = 0

    def find_card(self, card_id: str) -> Card | None:
        return next((c for c in self.cards if c.id == card_id), None)


@dataclass(frozen=True)
class DeletedCard:
    """A card sitting in the trash, remembering where it came from."""

    card: Card
    origin_deck_id: str
    origin_deck_name: str
    deleted_at: int


@dataclass(frozen=True)
class GeneratedCard:
    """A front/back pair proposed by the text-generation service."""

    front: str
    back: str
