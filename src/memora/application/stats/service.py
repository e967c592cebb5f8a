"""
Stats Service: Application layer orchestrator.

Reads cards, history and persisted stats from the store and assembles the
dashboard figures with the pure calculators.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from memora.domain.models import CardStatus, ReviewBreakdown, UserStats
from memora.domain.ports import FlashcardStore

from ..clock import now_ms
from ..streak import refresh_streak
from .metrics_calculator import (
    daily_review_counts,
    mastery_percent,
    review_breakdown,
    status_counts,
    streak_tier,
)

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    total_cards: int
    breakdown: ReviewBreakdown
    statuses: dict[CardStatus, int]
    mastery: int  # percent
    stats: UserStats
    streak_tier: str
    activity: list[tuple[date, int]]


class StatsService:
    """
    Application service for aggregate statistics.

    Depends on the FlashcardStore abstraction and an injected clock.
    """

    def __init__(self, store: FlashcardStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock

    def deck_breakdown(self, deck_id: str) -> ReviewBreakdown:
        cards = [c for c in self._store.list_cards() if c.deck_id == deck_id]
        return review_breakdown(cards, self._clock())

    def dashboard(self) -> Dashboard:
        """
        Build the full dashboard.

        The stored streak is decayed for inactivity before display. The
        decayed value is not written back.
        """
        now = self._clock()
        cards = self._store.list_cards()
        stats = refresh_streak(self._store.get_stats(), now)

        return Dashboard(
            total_cards=len(cards),
            breakdown=review_breakdown(cards, now),
            statuses=status_counts(cards),
            mastery=mastery_percent(cards),
            stats=stats,
            streak_tier=streak_tier(stats.streak_days),
            activity=daily_review_counts(self._store.list_history(), now),
        )
