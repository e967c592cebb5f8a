"""
Aggregate statistics over cards and review history.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from memora.domain.constants import (
    ACTIVITY_WINDOW_DAYS,
    DAY_MS,
    LEARNING_REPETITIONS,
    MASTERED_INTERVAL,
    STREAK_TIERS,
    WEEK_DAYS,
)
from memora.domain.models import CardStatus, Flashcard, ReviewBreakdown, ReviewEvent

from ..clock import local_day


def review_breakdown(cards: Iterable[Flashcard], now: int) -> ReviewBreakdown:
    """
    Count cards per due bucket.

    Each card lands in at most one of new/due_today/due_tomorrow/due_this_week
    (first match wins). Cards due more than a week out land in none.
    `learned` is counted independently for any card with repetitions > 0.
    """
    tomorrow = now + DAY_MS
    next_week = now + WEEK_DAYS * DAY_MS
    stats = ReviewBreakdown()

    for card in cards:
        if card.next_review is None:
            stats.new += 1
        elif card.next_review <= now:
            stats.due_today += 1
        elif card.next_review <= tomorrow:
            stats.due_tomorrow += 1
        elif card.next_review <= next_week:
            stats.due_this_week += 1

        if card.repetitions > 0:
            stats.learned += 1

    return stats


def classify(card: Flashcard) -> CardStatus:
    """
    Derive a card's status. Evaluated in order, first match wins:

    - never reviewed -> new
    - repetitions < 2 -> learning
    - interval < 30 days -> review
    - otherwise -> mastered
    """
    if card.last_reviewed is None:
        return CardStatus.NEW
    if card.repetitions < LEARNING_REPETITIONS:
        return CardStatus.LEARNING
    if card.interval < MASTERED_INTERVAL:
        return CardStatus.REVIEW
    return CardStatus.MASTERED


def status_counts(cards: Iterable[Flashcard]) -> dict[CardStatus, int]:
    counts = {status: 0 for status in CardStatus}
    for card in cards:
        counts[classify(card)] += 1
    return counts


def mastery_percent(cards: list[Flashcard]) -> int:
    """Share of mastered cards as a rounded percentage (0 for no cards)."""
    if not cards:
        return 0
    mastered = status_counts(cards)[CardStatus.MASTERED]
    return round(mastered / len(cards) * 100)


def daily_review_counts(
    history: Iterable[ReviewEvent], now: int, days: int = ACTIVITY_WINDOW_DAYS
) -> list[tuple[date, int]]:
    """
    Reviews per local calendar day over the last `days` days, oldest first.

    Days without reviews are reported with a count of 0. Events outside the
    window are ignored.
    """
    today = local_day(now)
    counts: dict[date, int] = {
        today - timedelta(days=offset): 0 for offset in range(days - 1, -1, -1)
    }

    for event in history:
        day = local_day(event.date)
        if day in counts:
            counts[day] += 1

    return list(counts.items())


def streak_tier(streak_days: int) -> str:
    for threshold, name in STREAK_TIERS:
        if streak_days >= threshold:
            return name
    return "starting"
