"""
Engagement stats and the study streak.

Stats are recomputed from the full review history rather than maintained
incrementally, so each call costs O(len(history)).

The streak only decays when one of these functions runs. A user who stops
studying keeps the stored streak until the next recompute or refresh.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import timedelta

from memora.domain.models import Flashcard, ReviewEvent, UserStats

from .clock import local_day

logger = logging.getLogger(__name__)


def recompute_stats(
    history: Sequence[ReviewEvent],
    prior: UserStats,
    now: int,
    cards: Iterable[Flashcard] | None = None,
) -> UserStats:
    """
    Recompute engagement stats after a study session.

    Args:
        history: Every review event recorded so far.
        prior: The previously persisted stats.
        now: Current epoch ms; decides which calendar day is "today".
        cards: If given, cards_learned is recounted (repetitions > 0);
            otherwise the prior value is kept.

    Returns:
        New stats. With an empty history, `prior` is returned unchanged.
    """
    if not history:
        logger.debug("No review history, stats unchanged")
        return prior

    total_reviews = len(history)
    average_rating = sum(event.rating for event in history) / total_reviews
    last_study_date = max(event.date for event in history)

    if cards is not None:
        cards_learned = sum(1 for card in cards if card.repetitions > 0)
    else:
        cards_learned = prior.cards_learned

    today = local_day(now)
    yesterday = today - timedelta(days=1)
    last_day = local_day(last_study_date)
    streak_days = prior.streak_days

    if last_day == today:
        if prior.last_study_date is None:
            streak_days = 1
        else:
            previous_day = local_day(prior.last_study_date)
            if previous_day == yesterday:
                streak_days += 1
            elif previous_day < yesterday:
                streak_days = 1
            # Already studied today: unchanged
    elif last_day < yesterday:
        streak_days = 0

    return UserStats(
        streak_days=streak_days,
        total_reviews=total_reviews,
        average_rating=average_rating,
        cards_learned=cards_learned,
        last_study_date=last_study_date,
    )


def refresh_streak(stats: UserStats, now: int) -> UserStats:
    """
    Apply inactivity decay without a new review event.

    The streak drops to 0 once the last study day is more than one
    calendar day before today.
    """
    if stats.last_study_date is None or stats.streak_days == 0:
        return stats

    yesterday = local_day(now) - timedelta(days=1)
    if local_day(stats.last_study_date) < yesterday:
        return replace(stats, streak_days=0)
    return stats
