"""
Ports (interfaces) for persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Deck, Flashcard, ReviewEvent, StudySession, UserStats


class FlashcardStore(ABC):
    """
    Port for the keyed record store holding cards, decks, sessions,
    review history and user stats.

    Implementations:
        - JsonFileStore: A single JSON document on disk.

    The store assumes a single writer. Read-modify-write sequences
    performed by callers are not atomic.
    """

    # ---------- Cards ----------

    @abstractmethod
    def list_cards(self) -> list[Flashcard]:
        pass

    @abstractmethod
    def get_card(self, card_id: str) -> Flashcard | None:
        pass

    @abstractmethod
    def add_card(
        self, front: str, back: str, deck_id: str, tags: list[str] | None = None
    ) -> Flashcard:
        """
        Create a new card with fresh scheduling state.

        Increments the owning deck's card_count.
        """
        pass

    @abstractmethod
    def update_card(self, card: Flashcard) -> bool:
        """
        Replace a stored card.

        Returns:
            False when the card no longer exists (nothing is written).
        """
        pass

    @abstractmethod
    def delete_card(self, card_id: str) -> bool:
        pass

    # ---------- Decks ----------

    @abstractmethod
    def list_decks(self) -> list[Deck]:
        pass

    @abstractmethod
    def get_deck(self, deck_id: str) -> Deck | None:
        pass

    @abstractmethod
    def add_deck(self, name: str, description: str = "") -> Deck:
        pass

    @abstractmethod
    def update_deck(self, deck: Deck) -> bool:
        pass

    @abstractmethod
    def delete_deck(self, deck_id: str) -> bool:
        """Delete a deck together with its cards and their review history."""
        pass

    # ---------- Sessions ----------

    @abstractmethod
    def list_sessions(self) -> list[StudySession]:
        pass

    @abstractmethod
    def start_session(self, deck_id: str) -> StudySession:
        pass

    @abstractmethod
    def end_session(
        self, session_id: str, cards_studied: int, cards_correct: int
    ) -> StudySession | None:
        """
        Finalize a session record and touch the deck's last_studied.

        Returns:
            The updated session, or None if the session no longer exists.
        """
        pass

    # ---------- History & stats ----------

    @abstractmethod
    def list_history(self) -> list[ReviewEvent]:
        pass

    @abstractmethod
    def append_review(
        self, card_id: str, deck_id: str, rating: int, time_spent: int
    ) -> ReviewEvent:
        """Append a review event; the store assigns its timestamp."""
        pass

    @abstractmethod
    def get_stats(self) -> UserStats:
        pass

    @abstractmethod
    def save_stats(self, stats: UserStats) -> None:
        pass

    # ---------- Bulk ----------

    @abstractmethod
    def export_data(self) -> str:
        """Serialize all five collections to a single document."""
        pass

    @abstractmethod
    def import_data(self, data: str) -> bool:
        """
        Replace the collections present in an exported document.

        Returns:
            False if the document could not be parsed (nothing is written).
        """
        pass
