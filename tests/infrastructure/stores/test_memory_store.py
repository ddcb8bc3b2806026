from flashdeck.domain.models import Deck, DeletedCard
from flashdeck.infrastructure.stores import MemoryDeckStore


def test_returned_objects_are_copies(store):
    deck = store.get_deck("d1")
    deck.name = "changed"
    deck.cards[0].front = "changed"
    fresh = store.get_deck("d1")
    assert fresh.name == "Biology"
    assert fresh.cards[0].front == "front c1"


def test_update_card_replaces_by_id(store, make_card):
    assert store.update_card("d1", make_card("c2", due_in_days=9, interval=5))
    assert [c.id for c in store.get_cards("d1")] == ["c1", "c2", "c3", "c4"]
    assert store.get_cards("d1")[1].interval == 5


def test_update_card_never_appends(store, make_card):
    assert store.update_card("d1", make_card("new")) is False
    assert store.update_card("missing", make_card("c1")) is False
    assert len(store.get_cards("d1")) == 4


def test_append_and_remove(store, make_card):
    store.append_card("d1", make_card("c5"))
    removed = store.remove_card("d1", "c1")
    assert removed.id == "c1"
    assert [c.id for c in store.get_cards("d1")] == ["c2", "c3", "c4", "c5"]
    assert store.remove_card("d1", "c1") is None


def test_append_to_missing_deck_is_ignored(store, make_card):
    store.append_card("missing", make_card("c9"))
    assert store.get_deck("missing") is None


def test_decks_keep_insertion_order():
    s = MemoryDeckStore()
    for name in ("b", "a", "c"):
        s.save_deck(Deck(id=name, name=name))
    assert [d.id for d in s.list_decks()] == ["b", "a", "c"]
    assert s.delete_deck("a") is True
    assert s.delete_deck("a") is False


def test_trash_round_trip(store, make_card):
    item = DeletedCard(make_card("x"), "d1", "Biology", 1)
    store.save_trash([item])
    assert store.list_trash() == [item]
    assert store.get_cards("unknown") == []
