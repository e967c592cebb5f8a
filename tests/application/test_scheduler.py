import pytest

from memora.application.scheduler import (
    compute_next_state,
    next_ease_factor,
    schedule_card,
    validate_rating,
)
from memora.domain.constants import DAY_MS
from memora.domain.errors import InvalidRating
from memora.domain.models import Flashcard, SchedulingState


def test_fresh_card_success_sequence(now):
    state = SchedulingState()
    intervals = []
    repetitions = []

    for _ in range(4):
        state = compute_next_state(state, 4, now)
        intervals.append(state.interval)
        repetitions.append(state.repetitions)

    assert repetitions == [1, 2, 3, 4]
    # 1, 6, round(6 * 2.5), round(15 * 2.5)
    assert intervals == [1, 6, 15, 38]
    assert state.ease_factor == pytest.approx(2.5)


def test_worked_example_success(now):
    prior = SchedulingState(ease_factor=2.5, interval=6, repetitions=2)

    state = compute_next_state(prior, 4, now)

    assert state.repetitions == 3
    assert state.interval == 15
    assert state.ease_factor == pytest.approx(2.5)
    assert state.last_reviewed == now
    assert state.next_review == now + 15 * DAY_MS


def test_worked_example_failure(now):
    prior = SchedulingState(ease_factor=2.5, interval=6, repetitions=2)

    state = compute_next_state(prior, 2, now)

    assert state.repetitions == 0
    assert state.interval == 1
    assert state.ease_factor == 2.5
    assert state.next_review == now + DAY_MS


@pytest.mark.parametrize("rating", [0, 1, 2])
def test_failure_resets_regardless_of_prior(now, rating):
    prior = SchedulingState(ease_factor=1.9, interval=120, repetitions=9, last_reviewed=1)

    state = compute_next_state(prior, rating, now)

    assert (state.repetitions, state.interval, state.ease_factor) == (0, 1, 1.9)


def test_ease_never_drops_below_floor(now):
    state = SchedulingState()
    for rating in [3] * 15 + [0] * 5 + [3] * 5:
        state = compute_next_state(state, rating, now)
        assert state.ease_factor >= 1.3

    assert state.ease_factor == pytest.approx(1.3)


@pytest.mark.parametrize(
    "rating, expected",
    [(5, 2.6), (4, 2.5), (3, 2.36)],
)
def test_ease_update_by_rating(rating, expected):
    assert next_ease_factor(2.5, rating) == pytest.approx(expected)


def test_interval_rounds_half_up(now):
    prior = SchedulingState(ease_factor=2.5, interval=5, repetitions=2)

    # 5 * 2.5 = 12.5
    assert compute_next_state(prior, 4, now).interval == 13


def test_missing_numeric_fields_use_defaults(now):
    prior = SchedulingState(ease_factor=None, interval=None, repetitions=None)

    state = compute_next_state(prior, 5, now)

    assert state.repetitions == 1
    assert state.interval == 1
    assert state.ease_factor == pytest.approx(2.6)


def test_input_state_is_not_mutated(now):
    prior = SchedulingState(ease_factor=2.5, interval=6, repetitions=2)
    compute_next_state(prior, 5, now)
    assert prior == SchedulingState(ease_factor=2.5, interval=6, repetitions=2)


def test_next_review_always_at_least_one_day_out(now):
    state = SchedulingState()
    for rating in [0, 5, 1, 3, 3, 2, 4]:
        state = compute_next_state(state, rating, now)
        assert state.next_review >= now + DAY_MS


@pytest.mark.parametrize("rating", [-1, 6, 2.5, "3", None, True])
def test_invalid_rating_rejected(now, rating):
    with pytest.raises(InvalidRating):
        compute_next_state(SchedulingState(), rating, now)


def test_validate_rating_accepts_range():
    assert [validate_rating(r) for r in range(6)] == [0, 1, 2, 3, 4, 5]


def test_schedule_card_keeps_card_fields(now):
    card = Flashcard(
        id="c1", front="hola", back="hello", deck_id="d1", created_at=0, tags=["greet"]
    )

    updated = schedule_card(card, 3, now)

    assert updated.id == "c1"
    assert updated.tags == ["greet"]
    assert updated.repetitions == 1
    assert updated.last_reviewed == now
    assert card.last_reviewed is None
