"""
Study Service: Application layer orchestrator.

Runs the read-modify-write sequence of a study pass against a FlashcardStore:
select due cards, reschedule each rated card, append review history, and
finalize the session with a stats recompute.
"""

import logging
from collections.abc import Callable

from memora.domain.models import Flashcard
from memora.domain.ports import FlashcardStore

from .clock import now_ms
from .due import select_due
from .scheduler import schedule_card, validate_rating
from .session import SessionSummary, StudySessionTracker
from .streak import recompute_stats

logger = logging.getLogger(__name__)

ALL_DECKS = "all"


class StudyService:
    """
    Application service for study sessions.

    Depends on the FlashcardStore abstraction and an injected clock.
    """

    def __init__(self, store: FlashcardStore, clock: Callable[[], int] = now_ms):
        self._store = store
        self._clock = clock

    def due_cards(self, deck_id: str | None = None) -> list[Flashcard]:
        return select_due(self._store.list_cards(), self._clock(), deck_id)

    def start(self, deck_id: str | None = None) -> StudySessionTracker | None:
        """
        Begin a study pass over the cards due now.

        Returns:
            An active tracker, or None when nothing is due (no session
            record is created in that case).
        """
        cards = self.due_cards(deck_id)
        if not cards:
            logger.info("No cards due")
            return None

        session = self._store.start_session(deck_id or ALL_DECKS)
        tracker = StudySessionTracker(session.id, session.deck_id, [c.id for c in cards])
        tracker.begin(session.start_time)
        logger.debug(f"Started session {session.id} with {len(cards)} cards")
        return tracker

    def present(self, tracker: StudySessionTracker, card_id: str) -> None:
        tracker.present(card_id, self._clock())

    def rate(
        self, tracker: StudySessionTracker, card_id: str, rating: int
    ) -> Flashcard | None:
        """
        Apply a rating to a card in an active session.

        The card is rescheduled and stored, a review event is appended, and
        the session is finished once every card has been rated.

        Returns:
            The rescheduled card, or None if the card was deleted meanwhile.

        Raises:
            InvalidRating: If rating is not an integer in 0..5.
            SessionStateError: If the tracker is not active.
            UnknownEntityReference: If the card is not part of the session.
        """
        validate_rating(rating)
        tracker.check_rateable(card_id)
        now = self._clock()

        card = self._store.get_card(card_id)
        if card is None:
            logger.warning(f"Card {card_id} no longer exists, skipping rating")
            tracker.drop(card_id)
        else:
            card = schedule_card(card, rating, now)
            if not self._store.update_card(card):
                logger.warning(f"Card {card_id} vanished before update, skipping")
                tracker.drop(card_id)
                card = None
            else:
                time_spent = tracker.rate(card_id, rating, now)
                self._store.append_review(card.id, card.deck_id, rating, time_spent)

        if tracker.is_complete:
            self.finish(tracker)
        return card

    def finish(self, tracker: StudySessionTracker) -> SessionSummary | None:
        """
        Finalize a session: persist its counts and recompute engagement stats.

        An abandoned session with no ratings leaves every record untouched.
        """
        now = self._clock()
        summary = tracker.finalize(now)
        if summary is None:
            return None

        ended = self._store.end_session(
            summary.session_id, summary.cards_studied, summary.cards_correct
        )
        if ended is None:
            logger.warning(f"Session {summary.session_id} no longer exists, skipping update")

        stats = recompute_stats(
            self._store.list_history(),
            self._store.get_stats(),
            now,
            cards=self._store.list_cards(),
        )
        self._store.save_stats(stats)
        logger.info(
            f"Session {summary.session_id}: {summary.cards_studied} studied, "
            f"{summary.cards_correct} correct, streak {stats.streak_days}"
        )
        return summary
