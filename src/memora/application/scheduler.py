"""
SM-2 review scheduler.

This is a pure computation module with no I/O. The caller injects the
current time and persists the returned state.
"""

import math

from memora.domain.constants import (
    DAY_MS,
    DEFAULT_EASE_FACTOR,
    FIRST_INTERVAL,
    MAX_RATING,
    MIN_EASE_FACTOR,
    MIN_RATING,
    PASSING_RATING,
    SECOND_INTERVAL,
)
from memora.domain.errors import InvalidRating
from memora.domain.models import Flashcard, SchedulingState


def validate_rating(rating: object) -> int:
    """Return the rating if it is an integer in 0..5, else raise InvalidRating."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating(rating)
    if rating < MIN_RATING or rating > MAX_RATING:
        raise InvalidRating(rating)
    return rating


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def next_ease_factor(ease_factor: float, rating: int) -> float:
    """
    Classic SM-2 ease update, clamped at 1.3.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    """
    miss = MAX_RATING - rating
    return max(MIN_EASE_FACTOR, ease_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def compute_next_state(prior: SchedulingState, rating: int, now: int) -> SchedulingState:
    """
    Compute a card's scheduling state after a confidence rating.

    Args:
        prior: Current scheduling state. Missing or zero numeric fields fall
            back to ease 2.5, interval 0, repetitions 0.
        rating: Confidence rating 0-5; below 3 is a failed recall.
        now: Epoch ms of the rating.

    Returns:
        A new SchedulingState with last_reviewed=now and
        next_review=now + interval days.

    Raises:
        InvalidRating: If rating is not an integer in 0..5.
    """
    validate_rating(rating)

    ease_factor = prior.ease_factor or DEFAULT_EASE_FACTOR
    interval = prior.interval or 0
    repetitions = prior.repetitions or 0

    if rating < PASSING_RATING:
        # Failed recall: start over, ease untouched
        repetitions = 0
        interval = FIRST_INTERVAL
    else:
        repetitions += 1

        if repetitions == 1:
            interval = FIRST_INTERVAL
        elif repetitions == 2:
            interval = SECOND_INTERVAL
        else:
            interval = _round_half_up(interval * ease_factor)

        ease_factor = next_ease_factor(ease_factor, rating)

    return SchedulingState(
        ease_factor=ease_factor,
        interval=interval,
        repetitions=repetitions,
        last_reviewed=now,
        next_review=now + interval * DAY_MS,
    )


def schedule_card(card: Flashcard, rating: int, now: int) -> Flashcard:
    """Return a copy of the card rescheduled for the given rating."""
    return card.with_state(compute_next_state(card.state, rating, now))
