from datetime import datetime, timedelta

import pytest

from flashdeck.application.deck_service import DeckService
from flashdeck.application.scheduler import to_epoch_ms
from flashdeck.domain.models import Card, Deck
from flashdeck.infrastructure.stores import MemoryDeckStore

NOW = datetime(2024, 3, 1, 9, 30)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_card():
    """Factory for cards whose due date is offset from NOW by whole days."""

    def _make(card_id, due_in_days=0, **fields):
        defaults = dict(
            id=card_id,
            front=f"front {card_id}",
            back=f"back {card_id}",
            created_at=to_epoch_ms(NOW - timedelta(days=30)),
            next_review_date=to_epoch_ms(NOW + timedelta(days=due_in_days)),
        )
        defaults.update(fields)
        return Card(**defaults)

    return _make


@pytest.fixture
def store(make_card):
    deck = Deck(
        id="d1",
        name="Biology",
        description="Cells and such",
        cards=[
            make_card("c1", due_in_days=-2),
            make_card("c2", due_in_days=-1),
            make_card("c3", due_in_days=0),
            make_card("c4", due_in_days=3),
        ],
        created_at=to_epoch_ms(NOW - timedelta(days=30)),
    )
    return MemoryDeckStore([deck])


@pytest.fixture
def service(store):
    return DeckService(store)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and isolates flashdeck env vars."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "FLASHDECK_DATA_PATH",
        "FLASHDECK_GEMINI_API_KEY",
        "FLASHDECK_GEMINI_MODEL",
        "FLASHDECK_SEED_DEMO",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def data_path(tmp_path, mock_home, monkeypatch):
    path = tmp_path / "data" / "decks.json"
    monkeypatch.setenv("FLASHDECK_DATA_PATH", str(path))
    return path
