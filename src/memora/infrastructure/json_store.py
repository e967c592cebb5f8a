"""
JSON File Store: Infrastructure adapter for a single JSON document on disk.

Implements FlashcardStore by keeping every collection in memory and
rewriting the document after each mutation.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from pydantic import ValidationError
from ulid import ULID

from memora.application.clock import now_ms
from memora.domain.errors import StoreCorrupted
from memora.domain.models import Deck, Flashcard, ReviewEvent, StudySession, UserStats
from memora.domain.ports import FlashcardStore

from .records import (
    CardRecord,
    DeckRecord,
    ReviewRecord,
    SessionRecord,
    StatsRecord,
    StoreDocument,
)

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a sortable unique record id using ULID."""
    return str(ULID())


class JsonFileStore(FlashcardStore):
    """
    Keyed record store persisted as one JSON document.

    The document layout is the same as the export format, so a data file can
    be imported elsewhere as-is.
    """

    def __init__(self, path: Path, clock: Callable[[], int] = now_ms):
        self.path = Path(path)
        self._clock = clock

        self._cards: dict[str, Flashcard] = {}
        self._decks: dict[str, Deck] = {}
        self._sessions: dict[str, StudySession] = {}
        self._history: list[ReviewEvent] = []
        self._stats = UserStats()

        if self.path.exists():
            self._load()

    # ---------- Cards ----------

    def list_cards(self) -> list[Flashcard]:
        return list(self._cards.values())

    def get_card(self, card_id: str) -> Flashcard | None:
        return self._cards.get(card_id)

    def add_card(
        self, front: str, back: str, deck_id: str, tags: list[str] | None = None
    ) -> Flashcard:
        card = Flashcard(
            id=generate_id(),
            front=front,
            back=back,
            deck_id=deck_id,
            tags=list(tags or []),
            created_at=self._clock(),
        )
        self._cards[card.id] = card

        deck = self._decks.get(deck_id)
        if deck:
            self._decks[deck_id] = replace(deck, card_count=deck.card_count + 1)
        else:
            logger.warning(f"Card {card.id} added to unknown deck {deck_id}")

        self._save()
        return card

    def update_card(self, card: Flashcard) -> bool:
        if card.id not in self._cards:
            return False
        self._cards[card.id] = card
        self._save()
        return True

    def delete_card(self, card_id: str) -> bool:
        card = self._cards.pop(card_id, None)
        if card is None:
            return False

        deck = self._decks.get(card.deck_id)
        if deck:
            self._decks[deck.id] = replace(deck, card_count=max(0, deck.card_count - 1))

        self._save()
        return True

    # ---------- Decks ----------

    def list_decks(self) -> list[Deck]:
        return list(self._decks.values())

    def get_deck(self, deck_id: str) -> Deck | None:
        return self._decks.get(deck_id)

    def add_deck(self, name: str, description: str = "") -> Deck:
        deck = Deck(
            id=generate_id(),
            name=name,
            description=description,
            created_at=self._clock(),
        )
        self._decks[deck.id] = deck
        self._save()
        return deck

    def update_deck(self, deck: Deck) -> bool:
        if deck.id not in self._decks:
            return False
        self._decks[deck.id] = deck
        self._save()
        return True

    def delete_deck(self, deck_id: str) -> bool:
        if self._decks.pop(deck_id, None) is None:
            return False

        self._cards = {cid: c for cid, c in self._cards.items() if c.deck_id != deck_id}
        self._history = [e for e in self._history if e.deck_id != deck_id]
        self._save()
        return True

    # ---------- Sessions ----------

    def list_sessions(self) -> list[StudySession]:
        return list(self._sessions.values())

    def start_session(self, deck_id: str) -> StudySession:
        session = StudySession(id=generate_id(), deck_id=deck_id, start_time=self._clock())
        self._sessions[session.id] = session
        self._save()
        return session

    def end_session(
        self, session_id: str, cards_studied: int, cards_correct: int
    ) -> StudySession | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None

        now = self._clock()
        session = replace(
            session,
            end_time=now,
            cards_studied=cards_studied,
            cards_correct=cards_correct,
        )
        self._sessions[session_id] = session

        deck = self._decks.get(session.deck_id)
        if deck:
            self._decks[deck.id] = replace(deck, last_studied=now)

        self._save()
        return session

    # ---------- History & stats ----------

    def list_history(self) -> list[ReviewEvent]:
        return list(self._history)

    def append_review(
        self, card_id: str, deck_id: str, rating: int, time_spent: int
    ) -> ReviewEvent:
        event = ReviewEvent(
            date=self._clock(),
            card_id=card_id,
            deck_id=deck_id,
            rating=rating,
            time_spent=time_spent,
        )
        self._history.append(event)
        self._save()
        return event

    def get_stats(self) -> UserStats:
        return self._stats

    def save_stats(self, stats: UserStats) -> None:
        self._stats = stats
        self._save()

    # ---------- Bulk ----------

    def export_data(self) -> str:
        return self._document().model_dump_json(by_alias=True)

    def import_data(self, data: str) -> bool:
        try:
            doc = StoreDocument.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Error importing data: {e}")
            return False

        self._apply(doc)
        self._save()
        return True

    # ---------- Internal ----------

    def _document(self) -> StoreDocument:
        return StoreDocument(
            cards=[CardRecord.from_domain(c) for c in self._cards.values()],
            decks=[DeckRecord.from_domain(d) for d in self._decks.values()],
            sessions=[SessionRecord.from_domain(s) for s in self._sessions.values()],
            history=[ReviewRecord.from_domain(e) for e in self._history],
            stats=StatsRecord.from_domain(self._stats),
        )

    def _apply(self, doc: StoreDocument) -> None:
        """Replace only the collections present in the document."""
        if doc.cards is not None:
            self._cards = {r.id: r.to_domain() for r in doc.cards}
        if doc.decks is not None:
            self._decks = {r.id: r.to_domain() for r in doc.decks}
        if doc.sessions is not None:
            self._sessions = {r.id: r.to_domain() for r in doc.sessions}
        if doc.history is not None:
            self._history = [r.to_domain() for r in doc.history]
        if doc.stats is not None:
            self._stats = doc.stats.to_domain()

    def _load(self) -> None:
        try:
            doc = StoreDocument.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError) as e:
            raise StoreCorrupted(f"Cannot read {self.path}: {e}") from e

        self._apply(doc)
        logger.debug(
            f"Loaded {len(self._cards)} cards, {len(self._decks)} decks "
            f"and {len(self._history)} reviews from {self.path}"
        )

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            self._document().model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
