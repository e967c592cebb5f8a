from unittest.mock import MagicMock

import pytest

from memora.application.session import SessionState, StudySessionTracker
from memora.application.study_service import ALL_DECKS, StudyService
from memora.domain.constants import DAY_MS
from memora.domain.errors import InvalidRating, SessionStateError, UnknownEntityReference
from memora.domain.models import UserStats


@pytest.fixture
def deck(store):
    return store.add_deck("Spanish")


@pytest.fixture
def cards(store, deck):
    return [
        store.add_card("el perro", "the dog", deck.id),
        store.add_card("el gato", "the cat", deck.id),
    ]


@pytest.fixture
def service(store, clock):
    return StudyService(store, clock)


def test_full_session_updates_cards_history_and_stats(service, store, clock, deck, cards):
    start = clock.now
    tracker = service.start(deck.id)
    assert tracker.card_ids == [c.id for c in cards]

    service.present(tracker, cards[0].id)
    clock.advance(2000)
    updated = service.rate(tracker, cards[0].id, 4)

    assert updated.repetitions == 1
    assert updated.next_review == clock.now + DAY_MS
    assert store.get_card(cards[0].id) == updated

    service.present(tracker, cards[1].id)
    clock.advance(3000)
    service.rate(tracker, cards[1].id, 2)

    assert tracker.state is SessionState.FINALIZED
    assert tracker.summary.cards_studied == 2
    assert tracker.summary.cards_correct == 1
    assert tracker.summary.time_spent == 5000

    history = store.list_history()
    assert [(e.card_id, e.rating, e.time_spent) for e in history] == [
        (cards[0].id, 4, 2000),
        (cards[1].id, 2, 3000),
    ]

    [session] = store.list_sessions()
    assert session.deck_id == deck.id
    assert session.start_time == start
    assert (session.cards_studied, session.cards_correct) == (2, 1)
    assert session.end_time == clock.now
    assert store.get_deck(deck.id).last_studied == clock.now

    stats = store.get_stats()
    assert stats.total_reviews == 2
    assert stats.average_rating == pytest.approx(3.0)
    assert stats.cards_learned == 1
    assert stats.streak_days == 1
    assert stats.last_study_date == clock.now


def test_rated_cards_are_no_longer_due(service, clock, deck, cards):
    tracker = service.start(deck.id)
    for card in cards:
        service.rate(tracker, card.id, 5)

    assert service.due_cards(deck.id) == []
    clock.advance_days(1)
    assert len(service.due_cards(deck.id)) == 2


def test_start_with_nothing_due_creates_no_session(service, store, deck):
    assert service.start(deck.id) is None
    assert store.list_sessions() == []


def test_start_across_decks(service, store, cards):
    other = store.add_deck("French")
    store.add_card("le chien", "the dog", other.id)

    tracker = service.start()

    assert tracker.deck_id == ALL_DECKS
    assert len(tracker.card_ids) == 3


def test_abandoned_session_leaves_records_untouched(service, store, deck, cards):
    tracker = service.start(deck.id)
    service.present(tracker, cards[0].id)

    assert service.finish(tracker) is None

    [session] = store.list_sessions()
    assert session.end_time is None
    assert store.get_stats() == UserStats()
    assert store.get_deck(deck.id).last_studied is None


def test_early_finish_records_partial_session(service, store, deck, cards):
    tracker = service.start(deck.id)
    service.rate(tracker, cards[0].id, 3)

    summary = service.finish(tracker)

    assert summary.cards_studied == 1
    assert store.list_sessions()[0].cards_studied == 1


def test_invalid_rating_writes_nothing(service, store, deck, cards):
    tracker = service.start(deck.id)

    with pytest.raises(InvalidRating):
        service.rate(tracker, cards[0].id, 7)

    assert store.list_history() == []
    assert store.get_card(cards[0].id).last_reviewed is None


def test_rating_after_finish_writes_nothing(service, store, clock, deck, cards):
    tracker = service.start(deck.id)
    service.rate(tracker, cards[0].id, 4)
    service.finish(tracker)
    before = store.get_card(cards[0].id)
    clock.advance_days(3)

    with pytest.raises(SessionStateError):
        service.rate(tracker, cards[0].id, 0)

    assert store.get_card(cards[0].id) == before
    assert len(store.list_history()) == 1


def test_rating_card_outside_session_writes_nothing(service, store, deck, cards):
    tracker = service.start(deck.id)
    tracker.drop(cards[1].id)

    with pytest.raises(UnknownEntityReference):
        service.rate(tracker, cards[1].id, 4)

    card = store.get_card(cards[1].id)
    assert (card.repetitions, card.last_reviewed) == (0, None)
    assert store.list_history() == []


def test_deleted_card_is_skipped(service, store, deck, cards):
    tracker = service.start(deck.id)
    service.rate(tracker, cards[0].id, 4)
    store.delete_card(cards[1].id)

    assert service.rate(tracker, cards[1].id, 4) is None

    # The remaining card was dropped, so the session finished with one rating
    assert tracker.state is SessionState.FINALIZED
    assert tracker.summary.cards_studied == 1
    assert len(store.list_history()) == 1


def test_missing_session_record_does_not_block_stats(clock, now):
    store = MagicMock()
    store.list_cards.return_value = []
    store.list_history.return_value = []
    store.get_stats.return_value = UserStats()
    store.end_session.return_value = None
    service = StudyService(store, clock)

    tracker = StudySessionTracker("gone", "d1", ["a"])
    tracker.begin(now)
    tracker.rate("a", 4, now)

    summary = service.finish(tracker)

    assert summary.cards_studied == 1
    store.end_session.assert_called_once_with("gone", 1, 1)
    store.save_stats.assert_called_once()
