# Domain Package
from .errors import (
    InvalidRating,
    MemoraError,
    SessionStateError,
    StoreCorrupted,
    UnknownEntityReference,
)
from .models import (
    CardStatus,
    Deck,
    Flashcard,
    ReviewBreakdown,
    ReviewEvent,
    SchedulingState,
    StudyCardReview,
    StudySession,
    UserStats,
)
from .ports import FlashcardStore

__all__ = [
    "CardStatus",
    "Deck",
    "Flashcard",
    "FlashcardStore",
    "InvalidRating",
    "MemoraError",
    "ReviewBreakdown",
    "ReviewEvent",
    "SchedulingState",
    "SessionStateError",
    "StoreCorrupted",
    "StudyCardReview",
    "StudySession",
    "UnknownEntityReference",
    "UserStats",
]
