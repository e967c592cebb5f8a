"""
Persisted document schema.

Records use camelCase keys on disk and convert to and from the domain
dataclasses. Missing scheduling fields load with their defaults so older
or hand-edited documents stay readable.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from memora.domain.constants import DEFAULT_EASE_FACTOR
from memora.domain.models import Deck, Flashcard, ReviewEvent, StudySession, UserStats


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CardRecord(_Record):
    id: str
    front: str
    back: str
    deck_id: str
    tags: list[str] = Field(default_factory=list)
    created_at: int
    last_reviewed: int | None = None
    next_review: int | None = None
    ease_factor: float = DEFAULT_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0

    @field_validator("ease_factor", mode="before")
    @classmethod
    def default_ease(cls, v):
        return DEFAULT_EASE_FACTOR if v is None else v

    @field_validator("interval", "repetitions", mode="before")
    @classmethod
    def default_zero(cls, v):
        return 0 if v is None else v

    @classmethod
    def from_domain(cls, card: Flashcard) -> "CardRecord":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            deck_id=card.deck_id,
            tags=list(card.tags),
            created_at=card.created_at,
            last_reviewed=card.last_reviewed,
            next_review=card.next_review,
            ease_factor=card.ease_factor,
            interval=card.interval,
            repetitions=card.repetitions,
        )

    def to_domain(self) -> Flashcard:
        return Flashcard(**self.model_dump())


class DeckRecord(_Record):
    id: str
    name: str
    description: str = ""
    created_at: int
    last_studied: int | None = None
    card_count: int = 0

    @classmethod
    def from_domain(cls, deck: Deck) -> "DeckRecord":
        return cls(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            created_at=deck.created_at,
            last_studied=deck.last_studied,
            card_count=deck.card_count,
        )

    def to_domain(self) -> Deck:
        return Deck(**self.model_dump())


class SessionRecord(_Record):
    id: str
    deck_id: str
    start_time: int
    end_time: int | None = None
    cards_studied: int = 0
    cards_correct: int = 0

    @classmethod
    def from_domain(cls, session: StudySession) -> "SessionRecord":
        return cls(
            id=session.id,
            deck_id=session.deck_id,
            start_time=session.start_time,
            end_time=session.end_time,
            cards_studied=session.cards_studied,
            cards_correct=session.cards_correct,
        )

    def to_domain(self) -> StudySession:
        return StudySession(**self.model_dump())


class ReviewRecord(_Record):
    date: int
    card_id: str
    deck_id: str
    rating: int
    time_spent: int = 0

    @classmethod
    def from_domain(cls, event: ReviewEvent) -> "ReviewRecord":
        return cls(
            date=event.date,
            card_id=event.card_id,
            deck_id=event.deck_id,
            rating=event.rating,
            time_spent=event.time_spent,
        )

    def to_domain(self) -> ReviewEvent:
        return ReviewEvent(**self.model_dump())


class StatsRecord(_Record):
    streak_days: int = 0
    total_reviews: int = 0
    average_rating: float = 0.0
    cards_learned: int = 0
    last_study_date: int | None = None

    @classmethod
    def from_domain(cls, stats: UserStats) -> "StatsRecord":
        return cls(
            streak_days=stats.streak_days,
            total_reviews=stats.total_reviews,
            average_rating=stats.average_rating,
            cards_learned=stats.cards_learned,
            last_study_date=stats.last_study_date,
        )

    def to_domain(self) -> UserStats:
        return UserStats(**self.model_dump())


class StoreDocument(_Record):
    """The whole store, also used as the export/import format."""

    cards: list[CardRecord] | None = None
    decks: list[DeckRecord] | None = None
    sessions: list[SessionRecord] | None = None
    history: list[ReviewRecord] | None = None
    stats: StatsRecord | None = None
