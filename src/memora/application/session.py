"""
In-memory tracking of a single study pass.

A tracker moves NOT_STARTED -> ACTIVE -> FINALIZED and is never reopened.
It only records ratings; persisting the session record is the caller's job.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from memora.domain.constants import PASSING_RATING
from memora.domain.errors import SessionStateError, UnknownEntityReference
from memora.domain.models import StudyCardReview

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    cards_studied: int
    cards_correct: int
    time_spent: int  # ms

    @property
    def accuracy(self) -> int:
        """Correct answers as a rounded percentage."""
        if self.cards_studied == 0:
            return 0
        return round(self.cards_correct / self.cards_studied * 100)


class StudySessionTracker:
    """
    Records per-card ratings for one study pass over a fixed set of cards.

    Finalization happens once, either when every card has been rated or when
    the caller ends the pass early.
    """

    def __init__(self, session_id: str, deck_id: str, card_ids: list[str]):
        self.session_id = session_id
        self.deck_id = deck_id
        self.card_ids = list(card_ids)
        self.state = SessionState.NOT_STARTED
        self.started_at: int | None = None
        self.ended_at: int | None = None
        self.summary: SessionSummary | None = None
        self._reviews: dict[str, StudyCardReview] = {}

    @property
    def reviews(self) -> list[StudyCardReview]:
        return list(self._reviews.values())

    @property
    def rated(self) -> list[StudyCardReview]:
        return [r for r in self._reviews.values() if r.rating is not None]

    @property
    def remaining(self) -> list[str]:
        """Card ids not rated yet, in study order."""
        done = {r.card_id for r in self.rated}
        return [cid for cid in self.card_ids if cid not in done]

    @property
    def is_complete(self) -> bool:
        return not self.remaining

    def begin(self, now: int) -> None:
        if self.state is not SessionState.NOT_STARTED:
            raise SessionStateError(f"Session {self.session_id} already {self.state.value}")
        self.state = SessionState.ACTIVE
        self.started_at = now

    def present(self, card_id: str, now: int) -> None:
        """Mark the moment a card is shown. Re-presenting keeps the first time."""
        self._require_active()
        self._require_member(card_id)
        self._reviews.setdefault(card_id, StudyCardReview(card_id=card_id, start_time=now))

    def check_rateable(self, card_id: str) -> None:
        """
        Raises:
            SessionStateError: If the session is not active.
            UnknownEntityReference: If the card is not part of this session.
        """
        self._require_active()
        self._require_member(card_id)

    def rate(self, card_id: str, rating: int, now: int) -> int:
        """
        Record a rating for a card.

        A card that was never presented starts at the rating moment.

        Returns:
            Milliseconds spent on the card.
        """
        self.check_rateable(card_id)

        review = self._reviews.setdefault(
            card_id, StudyCardReview(card_id=card_id, start_time=now)
        )
        review.rating = rating
        return now - review.start_time

    def drop(self, card_id: str) -> None:
        """Remove a card that disappeared from the store mid-session."""
        self._require_active()
        self._require_member(card_id)
        self.card_ids.remove(card_id)
        self._reviews.pop(card_id, None)

    def finalize(self, now: int) -> SessionSummary | None:
        """
        Close the session and summarize it.

        Returns:
            None if no card was rated (an abandoned session has nothing to
            record), otherwise the summary.

        Raises:
            SessionStateError: If the session is not active.
        """
        self._require_active()
        self.state = SessionState.FINALIZED
        self.ended_at = now

        rated = self.rated
        if not rated:
            logger.info(f"Session {self.session_id} abandoned before any rating")
            return None

        correct = sum(1 for r in rated if r.rating is not None and r.rating >= PASSING_RATING)
        started = min(r.start_time for r in rated)

        self.summary = SessionSummary(
            session_id=self.session_id,
            cards_studied=len(rated),
            cards_correct=correct,
            time_spent=now - started,
        )
        return self.summary

    def _require_active(self) -> None:
        if self.state is not SessionState.ACTIVE:
            raise SessionStateError(f"Session {self.session_id} is {self.state.value}")

    def _require_member(self, card_id: str) -> None:
        if card_id not in self.card_ids:
            raise UnknownEntityReference("card", card_id)
