"""Tests for study analytics and streaks."""

from datetime import date, datetime, timedelta, timezone

from wardnotes.models import Flashcard, FlashcardReview
from wardnotes.services.analytics_service import calculate_streak, get_study_analytics

API = "/api/v1"

TODAY = date(2026, 9, 10)


def add_review(session, card, reviewed_at, quality):
    session.add(FlashcardReview(
        flashcard_id=card.id,
        user_id=card.user_id,
        reviewed_at=reviewed_at,
        quality=quality,
        previous_ease_factor=2.5,
        previous_interval=0,
        previous_repetitions=0,
        new_ease_factor=2.5,
        new_interval=1,
        new_repetitions=1 if quality >= 3 else 0,
    ))


def test_streak_counts_consecutive_days():
    days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2), TODAY - timedelta(days=4)]
    assert calculate_streak(days, TODAY) == 3


def test_streak_survives_until_today_is_over():
    days = [TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert calculate_streak(days, TODAY) == 2


def test_streak_is_broken_by_a_missed_day():
    assert calculate_streak([TODAY - timedelta(days=2)], TODAY) == 0
    assert calculate_streak([], TODAY) == 0


def test_study_analytics_summarizes_window(session, user, other_user, deck):
    card = Flashcard(deck_id=deck.id, user_id=user.id, front_content="Q", back_content="A")
    foreign = Flashcard(deck_id=deck.id, user_id=other_user.id, front_content="Q", back_content="A")
    session.add(card)
    session.add(foreign)
    session.commit()

    now = datetime(2026, 9, 10, 18, 0, tzinfo=timezone.utc)
    add_review(session, card, now - timedelta(hours=2), 5)
    add_review(session, card, now - timedelta(hours=1), 2)
    add_review(session, card, now - timedelta(days=1), 4)
    add_review(session, card, now - timedelta(days=2), 3)
    # Outside a 7 day window but part of the streak history
    add_review(session, card, now - timedelta(days=40), 1)
    add_review(session, foreign, now - timedelta(hours=3), 0)
    session.commit()

    analytics = get_study_analytics(session, user.id, days=7, now=now)

    assert analytics.days == 7
    assert analytics.total_reviews == 4
    assert analytics.accuracy == 75.0
    assert analytics.streak == 3
    assert [(day.date, day.reviews, day.accuracy) for day in analytics.daily_stats] == [
        ("2026-09-08", 1, 100.0),
        ("2026-09-09", 1, 100.0),
        ("2026-09-10", 2, 50.0),
    ]


def test_study_analytics_with_no_reviews(session, user):
    analytics = get_study_analytics(session, user.id, days=30, now=datetime(2026, 9, 10, 12, 0, tzinfo=timezone.utc))

    assert analytics.total_reviews == 0
    assert analytics.accuracy == 0.0
    assert analytics.streak == 0
    assert analytics.daily_stats == []


def test_analytics_endpoint(client, auth_headers, deck):
    card = client.post(
        f"{API}/flashcards",
        json={"deck_id": deck.id, "front_content": "Q", "back_content": "A"},
        headers=auth_headers,
    ).json()["flashcard"]
    client.post(f"{API}/flashcards/review", json={"flashcard_id": card["id"], "quality": 4}, headers=auth_headers)

    response = client.get(f"{API}/analytics/study", params={"days": 14}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["days"] == 14
    assert body["total_reviews"] == 1
    assert body["accuracy"] == 100.0
    assert body["streak"] == 1

    assert client.get(f"{API}/analytics/study", params={"days": 0}, headers=auth_headers).status_code == 422
