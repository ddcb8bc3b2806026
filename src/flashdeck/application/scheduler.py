"""
Fixed-bucket spaced repetition scheduler (a simplified SM-2).

This is a pure computation module with no I/O. Each rating maps to a fixed
interval; only HARD and EASY move the ease factor.
"""

from datetime import datetime, timedelta

from flashdeck.domain.constants import (
    EASE_STEP,
    INITIAL_EASE_FACTOR,
    INTERVAL_AGAIN,
    INTERVAL_EASY,
    INTERVAL_GOOD,
    INTERVAL_HARD,
    MIN_EASE_FACTOR,
)
from flashdeck.domain.models import Card, Rating, SchedulingState


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def now_ms() -> int:
    return to_epoch_ms(datetime.now())


def add_calendar_days(moment: datetime, days: int) -> datetime:
    """
    Move a moment forward by whole calendar days, keeping the wall-clock time.

    Naive datetimes are local time and zoneinfo-aware datetimes keep their zone,
    so a DST change in between shifts the elapsed milliseconds, not the date.
    """
    return moment + timedelta(days=days)


def new_scheduling_state(now: datetime | None = None) -> SchedulingState:
    """Initial state for a freshly created card: due immediately."""
    now = now or datetime.now()
    return SchedulingState(
        interval=0,
        repetition=0,
        ease_factor=INITIAL_EASE_FACTOR,
        next_review_date=to_epoch_ms(now),
        last_difficulty=None,
    )


def compute_next_state(
    state: SchedulingState,
    rating: Rating | str,
    now: datetime | None = None,
) -> SchedulingState:
    """
    Compute the scheduling state that follows a review.

    | Rating | repetition | ease factor              | interval |
    |--------|------------|--------------------------|----------|
    | AGAIN  | 0          | unchanged                | 0        |
    | HARD   | +1         | max(1.3, ease - 0.15)    | 1        |
    | GOOD   | +1         | unchanged                | 5        |
    | EASY   | +1         | ease + 0.15              | 14       |

    Args:
        state: Current scheduling state of the card.
        rating: One of the four ratings (or its string value).
        now: Evaluation time; defaults to the local wall clock.

    Returns:
        A new SchedulingState; the input is never modified.

    Raises:
        ValueError: If ``rating`` is not one of the four ratings.
    """
    rating = Rating(rating)

    repetition = state.repetition
    ease_factor = state.ease_factor

    if rating is Rating.AGAIN:
        repetition = 0
        interval = INTERVAL_AGAIN
    else:
        if rating is Rating.HARD:
            ease_factor = max(MIN_EASE_FACTOR, ease_factor - EASE_STEP)
            interval = INTERVAL_HARD
        elif rating is Rating.GOOD:
            interval = INTERVAL_GOOD
        else:
            ease_factor = ease_factor + EASE_STEP
            interval = INTERVAL_EASY
        repetition += 1

    # Whole days only, never negative.
    interval = max(0, int(round(interval)))

    now = now or datetime.now()
    return SchedulingState(
        interval=interval,
        repetition=repetition,
        ease_factor=ease_factor,
        next_review_date=to_epoch_ms(add_calendar_days(now, interval)),
        last_difficulty=rating,
    )


def preview_intervals(state: SchedulingState) -> dict[Rating, int]:
    """Dry-run every rating and report the interval each would produce."""
    return {rating: compute_next_state(state, rating).interval for rating in Rating}


def interval_label(interval: int) -> str:
    if interval == 0:
        return "Now"
    return f"{interval}d"


def is_due(card: Card, at_ms: int | None = None) -> bool:
    """A card is due when its review date has passed and it is not marked done."""
    if card.is_done:
        return False
    return card.next_review_date <= (now_ms() if at_ms is None else at_ms)
