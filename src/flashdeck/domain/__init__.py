# Domain Package
from .errors import (
    FlashdeckError,
    GenerationError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .models import Card, Deck, DeletedCard, GeneratedCard, Rating, SchedulingState
from .ports import CardGenerator, DeckStore

__all__ = [
    "Card",
    "CardGenerator",
    "Deck",
    "DeckStore",
    "DeletedCard",
    "FlashdeckError",
    "GeneratedCard",
    "GenerationError",
    "InvalidTransitionError",
    "NotFoundError",
    "Rating",
    "SchedulingState",
    "StoreError",
    "ValidationError",
]
