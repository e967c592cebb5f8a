import pytest

from memora.application.streak import recompute_stats, refresh_streak
from memora.domain.models import Flashcard, ReviewEvent, UserStats


def event(date, rating=4):
    return ReviewEvent(date=date, card_id="c1", deck_id="d1", rating=rating, time_spent=1000)


def test_empty_history_leaves_stats_unchanged(now):
    prior = UserStats(streak_days=4, total_reviews=9, last_study_date=now)
    assert recompute_stats([], prior, now) is prior


def test_first_study_day_starts_streak(at):
    now = at(2026, 3, 10, 20)
    stats = recompute_stats([event(at(2026, 3, 10, 19))], UserStats(), now)
    assert stats.streak_days == 1


def test_studied_yesterday_extends_streak(at):
    now = at(2026, 3, 10, 20)
    prior = UserStats(streak_days=5, last_study_date=at(2026, 3, 9, 21))
    history = [event(at(2026, 3, 9, 21)), event(at(2026, 3, 10, 19))]

    stats = recompute_stats(history, prior, now)

    assert stats.streak_days == 6
    assert stats.last_study_date == at(2026, 3, 10, 19)


def test_gap_restarts_streak(at):
    now = at(2026, 3, 10, 20)
    prior = UserStats(streak_days=5, last_study_date=at(2026, 3, 7, 10))
    history = [event(at(2026, 3, 7, 10)), event(at(2026, 3, 10, 8))]

    assert recompute_stats(history, prior, now).streak_days == 1


def test_second_session_same_day_keeps_streak(at):
    now = at(2026, 3, 10, 20)
    prior = UserStats(streak_days=3, last_study_date=at(2026, 3, 10, 8))
    history = [event(at(2026, 3, 10, 8)), event(at(2026, 3, 10, 19))]

    assert recompute_stats(history, prior, now).streak_days == 3


def test_yesterday_across_midnight_counts_as_consecutive(at):
    # 23:59 then 00:01 is one minute apart but two calendar days
    now = at(2026, 3, 10, 0, 5)
    prior = UserStats(streak_days=2, last_study_date=at(2026, 3, 9, 23, 59))
    history = [event(at(2026, 3, 9, 23, 59)), event(at(2026, 3, 10, 0, 1))]

    assert recompute_stats(history, prior, now).streak_days == 3


def test_inactivity_breaks_streak_without_new_event(at):
    now = at(2026, 3, 10, 12)
    prior = UserStats(streak_days=8, last_study_date=at(2026, 3, 7, 12))
    history = [event(at(2026, 3, 7, 12))]

    assert recompute_stats(history, prior, now).streak_days == 0


def test_last_study_yesterday_keeps_streak(at):
    now = at(2026, 3, 10, 12)
    prior = UserStats(streak_days=8, last_study_date=at(2026, 3, 9, 12))
    history = [event(at(2026, 3, 9, 12))]

    assert recompute_stats(history, prior, now).streak_days == 8


def test_totals_and_average(at):
    now = at(2026, 3, 10, 20)
    history = [event(at(2026, 3, 10, 9), rating=r) for r in (5, 4, 0, 3)]

    stats = recompute_stats(history, UserStats(cards_learned=7), now)

    assert stats.total_reviews == 4
    assert stats.average_rating == pytest.approx(3.0)
    assert stats.cards_learned == 7


def test_cards_learned_recounted_when_cards_given(now):
    cards = [
        Flashcard(id=str(i), front="f", back="b", deck_id="d", created_at=0, repetitions=r)
        for i, r in enumerate([0, 1, 4])
    ]
    stats = recompute_stats([event(now)], UserStats(cards_learned=99), now, cards=cards)
    assert stats.cards_learned == 2


def test_refresh_streak_decays_after_missed_day(at):
    stats = UserStats(streak_days=4, last_study_date=at(2026, 3, 7, 12))
    assert refresh_streak(stats, at(2026, 3, 10, 12)).streak_days == 0


def test_refresh_streak_keeps_recent_streak(at):
    stats = UserStats(streak_days=4, last_study_date=at(2026, 3, 9, 22))
    assert refresh_streak(stats, at(2026, 3, 10, 12)) is stats
