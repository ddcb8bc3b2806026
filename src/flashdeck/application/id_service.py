"""Identifiers and factories for new decks and cards."""

from datetime import datetime

from ulid import ULID

from flashdeck.application.scheduler import new_scheduling_state, to_epoch_ms
from flashdeck.domain.models import Card, Deck


def generate_id() -> str:
    """Generate a sortable unique id using ULID."""
    return str(ULID())


def create_new_card(front: str, back: str, now: datetime | None = None) -> Card:
    """Build a card with default scheduling state, due immediately."""
    now = now or datetime.now()
    state = new_scheduling_state(now)
    return Card(
        id=generate_id(),
        front=front,
        back=back,
        created_at=to_epoch_ms(now),
    ).with_scheduling(state)


def create_new_deck(name: str, description: str = "", now: datetime | None = None) -> Deck:
    now = now or datetime.now()
    return Deck(id=generate_id(), name=name, description=description, created_at=to_epoch_ms(now))
