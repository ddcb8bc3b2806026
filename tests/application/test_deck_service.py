import random

import pytest

from flashdeck.application.scheduler import to_epoch_ms
from flashdeck.application.session import SessionState
from flashdeck.domain.constants import RESTORED_DECK_ID
from flashdeck.domain.errors import NotFoundError, ValidationError
from flashdeck.domain.models import Rating


# --- Decks ---


def test_create_and_list_decks(service):
    deck = service.create_deck("  Chemistry ", " Bonds ")
    assert deck.name == "Chemistry"
    assert deck.description == "Bonds"
    assert [d.name for d in service.list_decks()] == ["Biology", "Chemistry"]


def test_create_deck_rejects_blank_name(service):
    with pytest.raises(ValidationError):
        service.create_deck("   ")


def test_edit_deck(service):
    edited = service.edit_deck("d1", "Bio 101", "Intro")
    assert (edited.name, edited.description) == ("Bio 101", "Intro")
    assert len(service.get_deck("d1").cards) == 4


def test_delete_deck(service):
    service.delete_deck("d1")
    assert service.list_decks() == []
    with pytest.raises(NotFoundError):
        service.delete_deck("d1")


def test_get_missing_deck(service):
    with pytest.raises(NotFoundError):
        service.get_deck("nope")


def test_due_count_and_summaries(service, now):
    at = to_epoch_ms(now)
    assert service.due_count("d1", at) == 3
    [summary] = service.deck_summaries(at)
    assert (summary.name, summary.total, summary.due) == ("Biology", 4, 3)


# --- Cards ---


def test_add_card_is_due_immediately(service):
    card = service.add_card("d1", " Mitosis ", " Cell division ")
    assert (card.front, card.back) == ("Mitosis", "Cell division")
    assert (card.interval, card.repetition, card.ease_factor) == (0, 0, 2.5)
    assert card.next_review_date == card.created_at
    assert service.get_deck("d1").cards[-1].id == card.id


@pytest.mark.parametrize("front,back", [("", "x"), ("x", "  ")])
def test_add_card_rejects_blank_text(service, front, back):
    with pytest.raises(ValidationError):
        service.add_card("d1", front, back)


def test_add_cards_to_missing_deck(service):
    with pytest.raises(NotFoundError):
        service.add_cards("nope", [("a", "b")])


def test_edit_card_keeps_schedule(service, make_card, store):
    store.update_card("d1", make_card("c1", due_in_days=4, interval=5, repetition=2))
    edited = service.edit_card("d1", "c1", "New front", "New back")
    stored = service.get_card("d1", "c1")
    assert (stored.front, stored.back) == ("New front", "New back")
    assert (stored.interval, stored.repetition) == (5, 2)
    assert edited == stored


def test_reset_card_clears_done_and_schedule(service, make_card, store):
    store.update_card(
        "d1", make_card("c4", due_in_days=10, interval=14, repetition=4, ease_factor=2.8, is_done=True)
    )
    reset = service.reset_card("d1", "c4")
    assert (reset.interval, reset.repetition, reset.ease_factor) == (0, 0, 2.5)
    assert reset.is_done is False
    assert reset.last_difficulty is None


def test_update_card_for_unknown_card_is_ignored(service, make_card):
    service.update_card("d1", make_card("ghost"))
    assert service.get_deck("d1").find_card("ghost") is None


# --- Trash ---


def test_delete_card_moves_it_to_trash(service):
    entry = service.delete_card("d1", "c2")
    assert entry.origin_deck_id == "d1"
    assert entry.origin_deck_name == "Biology"
    assert service.get_deck("d1").find_card("c2") is None
    assert [t.card.id for t in service.list_trash()] == ["c2"]


def test_trash_is_newest_first_and_filterable(service):
    other = service.create_deck("Other")
    card = service.add_card(other.id, "q", "a")
    service.delete_card("d1", "c1")
    service.delete_card(other.id, card.id)

    assert [t.card.id for t in service.list_trash()] == [card.id, "c1"]
    assert [t.card.id for t in service.list_trash("d1")] == ["c1"]


def test_restore_card_to_origin_deck(service):
    service.delete_card("d1", "c1")
    deck = service.restore_card("c1")
    assert deck.id == "d1"
    assert deck.find_card("c1") is not None
    assert service.list_trash() == []


def test_restore_card_when_origin_deck_is_gone(service):
    service.delete_card("d1", "c1")
    service.delete_card("d1", "c2")
    service.delete_deck("d1")

    deck = service.restore_card("c1")
    assert deck.id == RESTORED_DECK_ID
    assert deck.name == "Restored Cards"

    deck = service.restore_card("c2")
    assert deck.id == RESTORED_DECK_ID
    assert [c.id for c in deck.cards] == ["c1", "c2"]
    assert len([d for d in service.list_decks() if d.id == RESTORED_DECK_ID]) == 1


def test_purge(service):
    service.delete_card("d1", "c3")
    service.purge("c3")
    assert service.list_trash() == []
    with pytest.raises(NotFoundError):
        service.purge("c3")
    with pytest.raises(NotFoundError):
        service.restore_card("c3")


def test_delete_missing_card(service):
    with pytest.raises(NotFoundError):
        service.delete_card("d1", "nope")


# --- Study ---


def test_session_persists_each_rating(service, clock):
    session = service.start_session("d1", clock=clock, rng=random.Random(3))
    assert session.state is SessionState.ACTIVE
    first = session.current.id

    session.rate(Rating.GOOD)

    stored = service.get_card("d1", first)
    assert stored.interval == 5
    assert stored.last_difficulty is Rating.GOOD


def test_session_queue_survives_store_changes(service, clock):
    session = service.start_session("d1", clock=clock)
    assert len(session.queue) == 3

    session.rate(Rating.EASY)
    service.add_card("d1", "fresh", "card")
    deleted_id = session.current.id
    service.delete_card("d1", deleted_id)

    # The store changed under the session, the queue did not.
    assert len(session.queue) == 3
    session.rate(Rating.GOOD)
    session.rate(Rating.GOOD)
    assert session.state is SessionState.FINISHED
    # Rating a card that was deleted meanwhile does not resurrect it.
    assert service.get_deck("d1").find_card(deleted_id) is None
    assert len(service.get_deck("d1").cards) == 4


def test_session_done_card_is_excluded_next_time(service, clock):
    session = service.start_session("d1", clock=clock, rng=random.Random(1))
    done_id = session.current.id
    session.mark_done()

    again = service.start_session("d1", clock=clock)
    assert done_id not in [c.id for c in again.queue]
    assert len(again.queue) == 2


def test_empty_session(service, clock):
    for card_id in ("c1", "c2", "c3"):
        service.delete_card("d1", card_id)
    session = service.start_session("d1", clock=clock)
    assert session.state is SessionState.EMPTY


def test_start_session_on_missing_deck(service):
    with pytest.raises(NotFoundError):
        service.start_session("nope")
