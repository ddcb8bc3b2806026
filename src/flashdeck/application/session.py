"""
Study session sequencer.

Walks a frozen, shuffled queue of due cards one at a time:
1. Snapshot the due subset of a deck once, at start
2. Shuffle it with a uniform permutation
3. Apply scheduler output card by card and hand each change to the store
"""

import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from enum import Enum

from flashdeck.application.scheduler import (
    compute_next_state,
    interval_label,
    is_due,
    to_epoch_ms,
)
from flashdeck.domain.errors import InvalidTransitionError
from flashdeck.domain.models import Card, Rating

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    EMPTY = "empty"  # nothing was due
    FINISHED = "finished"
    CLOSED = "closed"  # acknowledged; control is back with the caller


class StudySession:
    """
    One pass over the cards that were due when the session started.

    The queue is copied by value and never re-derived, so updates the store
    receives mid-session (including our own) cannot shift the cursor.
    Invariant: ``0 <= cursor <= len(queue)``, and ``cursor == len(queue)``
    only in FINISHED.
    """

    def __init__(
        self,
        cards: Iterable[Card],
        on_update: Callable[[Card], None],
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
        on_complete: Callable[[], None] | None = None,
    ):
        """
        Args:
            cards: Every card of the deck; due filtering happens in start().
            on_update: Receives each rated or done card for persistence.
            clock: Source of "now" for due filtering and scheduling.
            rng: Random source for the shuffle; injectable for tests.
            on_complete: Called once when a terminal state is acknowledged.
        """
        self._source = list(cards)
        self._on_update = on_update
        self._on_complete = on_complete
        self._clock = clock
        self._rng = rng or random.Random()

        self._queue: list[Card] = []
        self._cursor = 0
        self._reviewed = 0
        self._revealed = False
        self.state = SessionState.UNINITIALIZED

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def start(self) -> SessionState:
        """Filter and shuffle once. Later calls leave the queue untouched."""
        if self.state is not SessionState.UNINITIALIZED:
            return self.state

        at_ms = to_epoch_ms(self._clock())
        queue = [replace(card) for card in self._source if is_due(card, at_ms)]
        self._rng.shuffle(queue)
        self._source = []

        self._queue = queue
        self._cursor = 0
        self.state = SessionState.ACTIVE if queue else SessionState.EMPTY
        logger.debug(f"Session started with {len(queue)} due cards ({self.state.value})")
        return self.state

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @property
    def queue(self) -> tuple[Card, ...]:
        return tuple(self._queue)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Card:
        self._require(SessionState.ACTIVE, "present a card")
        return self._queue[self._cursor]

    @property
    def revealed(self) -> bool:
        return self._revealed

    def reveal(self) -> None:
        self._require(SessionState.ACTIVE, "reveal")
        self._revealed = True

    def flip(self) -> bool:
        self._require(SessionState.ACTIVE, "flip")
        self._revealed = not self._revealed
        return self._revealed

    def preview(self) -> dict[Rating, str]:
        """Label each rating with the interval it would give the current card."""
        state = self.current.scheduling
        now = self._clock()
        return {
            rating: interval_label(compute_next_state(state, rating, now).interval)
            for rating in Rating
        }

    @property
    def progress(self) -> tuple[int, int]:
        """(cards handled so far, queue length)."""
        return self._cursor, len(self._queue)

    @property
    def reviewed(self) -> int:
        return self._reviewed

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def rate(self, rating: Rating | str) -> Card:
        """Schedule the current card, emit the update, and move on."""
        card = self.current
        state = compute_next_state(card.scheduling, rating, self._clock())
        updated = card.with_scheduling(state)
        self._emit(updated)
        self._reviewed += 1
        self._advance()
        return updated

    def mark_done(self) -> Card:
        """Retire the current card for good without touching its schedule."""
        card = self.current
        updated = replace(card, is_done=True)
        self._emit(updated)
        self._advance()
        return updated

    def acknowledge(self) -> None:
        if self.state not in (SessionState.FINISHED, SessionState.EMPTY):
            raise InvalidTransitionError(
                f"Cannot acknowledge a session that is {self.state.value}"
            )
        self.state = SessionState.CLOSED
        if self._on_complete is not None:
            self._on_complete()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _emit(self, card: Card) -> None:
        self._queue[self._cursor] = card
        self._on_update(card)

    def _advance(self) -> None:
        self._revealed = False
        self._cursor += 1
        if self._cursor >= len(self._queue):
            self.state = SessionState.FINISHED
            logger.debug(f"Session finished after {len(self._queue)} cards")

    def _require(self, expected: SessionState, action: str) -> None:
        if self.state is not expected:
            raise InvalidTransitionError(
                f"Cannot {action} while the session is {self.state.value}"
            )
