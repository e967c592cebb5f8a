"""
Domain models for flashcards, decks, sessions and review history.

These are pure data structures with no I/O or external dependencies.
All timestamps are epoch milliseconds.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .constants import DEFAULT_EASE_FACTOR


class CardStatus(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


@dataclass(frozen=True)
class SchedulingState:
    """
    SM-2 scheduling state of a card.

    Attributes:
        ease_factor: Interval multiplier, never below 1.3.
        interval: Days until the next review after the last successful one.
        repetitions: Consecutive successful recalls (reset to 0 on failure).
        last_reviewed: Epoch ms of the last rating, None for a new card.
        next_review: Epoch ms the card becomes due, None means due now.
    """

    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    last_reviewed: int | None = None
    next_review: int | None = None


@dataclass(frozen=True)
class Flashcard:
    id: str
    front: str
    back: str
    deck_id: str
    created_at: int
    tags: list[str] = field(default_factory=list)

    # Scheduling
    last_reviewed: int | None = None
    next_review: int | None = None
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0  # days
    repetitions: int = 0

    @property
    def state(self) -> SchedulingState:
        return SchedulingState(
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            last_reviewed=self.last_reviewed,
            next_review=self.next_review,
        )

    def with_state(self, state: SchedulingState) -> "Flashcard":
        """Return a copy of this card carrying the given scheduling state."""
        return replace(
            self,
            ease_factor=state.ease_factor,
            interval=state.interval,
            repetitions=state.repetitions,
            last_reviewed=state.last_reviewed,
            next_review=state.next_review,
        )


@dataclass(frozen=True)
class Deck:
    id: str
    name: str
    created_at: int
    description: str = ""
    last_studied: int | None = None
    card_count: int = 0  # maintained by the store on card add/remove


@dataclass(frozen=True)
class StudySession:
    id: str
    deck_id: str
    start_time: int
    end_time: int | None = None
    cards_studied: int = 0
    cards_correct: int = 0


@dataclass(frozen=True)
class ReviewEvent:
    """
    A single rating action, appended to the review history.

    Attributes:
        date: Epoch ms assigned by the store when the event is recorded.
        card_id: The card that was rated.
        deck_id: The deck owning the card.
        rating: Confidence rating 0-5.
        time_spent: Milliseconds between showing the card and rating it.
    """

    date: int
    card_id: str
    deck_id: str
    rating: int
    time_spent: int


@dataclass(frozen=True)
class UserStats:
    streak_days: int = 0
    total_reviews: int = 0
    average_rating: float = 0.0
    cards_learned: int = 0
    last_study_date: int | None = None


@dataclass
class ReviewBreakdown:
    """Due-count buckets for a set of cards."""

    due_today: int = 0
    due_tomorrow: int = 0
    due_this_week: int = 0
    learned: int = 0
    new: int = 0


@dataclass
class StudyCardReview:
    """Per-card record kept by an active study session."""

    card_id: str
    start_time: int
    rating: int | None = None
