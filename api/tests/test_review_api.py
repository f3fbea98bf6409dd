"""API tests for POST /flashcards/review and review history."""

from sqlalchemy.exc import OperationalError
from sqlmodel import select

from wardnotes.models import Flashcard, FlashcardReview

API = "/api/v1"


def create_card(client, headers, deck_id, front="Drug of choice for SVT?", back="Adenosine"):
    response = client.post(
        f"{API}/flashcards",
        json={"deck_id": deck_id, "front_content": front, "back_content": back},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["flashcard"]


def test_first_review_schedules_card_for_tomorrow(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)
    assert card["status"] == "new"
    assert card["ease_factor"] == 2.5

    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 4, "response_time": 3.5},
        headers=auth_headers,
    )

    assert response.status_code == 200
    reviewed = response.json()["flashcard"]
    assert reviewed["status"] == "learning"
    assert reviewed["repetitions"] == 1
    assert reviewed["interval_days"] == 1
    assert reviewed["ease_factor"] == 2.5
    assert reviewed["total_reviews"] == 1
    assert reviewed["correct_reviews"] == 1
    assert reviewed["last_reviewed"] is not None
    assert reviewed["next_review"] > reviewed["last_reviewed"]
    assert reviewed["next_review"].endswith(("Z", "+00:00"))


def test_review_sequence_grows_interval(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)

    intervals = []
    for quality in (5, 5, 5):
        response = client.post(
            f"{API}/flashcards/review",
            json={"flashcard_id": card["id"], "quality": quality},
            headers=auth_headers,
        )
        assert response.status_code == 200
        intervals.append(response.json()["flashcard"]["interval_days"])

    # 1 day, 6 days, then 6 * 2.7 = 16.2
    assert intervals == [1, 6, 16]
    final = response.json()["flashcard"]
    assert final["ease_factor"] == 2.8
    assert final["status"] == "review"


def test_lapse_demotes_to_learning(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)
    for quality in (4, 4):
        client.post(
            f"{API}/flashcards/review",
            json={"flashcard_id": card["id"], "quality": quality},
            headers=auth_headers,
        )

    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 1},
        headers=auth_headers,
    )

    reviewed = response.json()["flashcard"]
    assert reviewed["status"] == "learning"
    assert reviewed["repetitions"] == 0
    assert reviewed["interval_days"] == 1
    assert reviewed["total_reviews"] == 3
    assert reviewed["correct_reviews"] == 2


def test_review_requires_authentication(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)

    response = client.post(f"{API}/flashcards/review", json={"flashcard_id": card["id"], "quality": 4})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_review_with_invalid_token_is_unauthorized(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)

    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 4},
        headers={"Authorization": "Bearer not-a-real-token"},
    )

    assert response.status_code == 401


def test_quality_out_of_range_is_rejected(client, auth_headers, deck, session):
    card = create_card(client, auth_headers, deck.id)

    for quality in (-1, 6, 2.5):
        response = client.post(
            f"{API}/flashcards/review",
            json={"flashcard_id": card["id"], "quality": quality},
            headers=auth_headers,
        )
        assert response.status_code == 422

    stored = session.get(Flashcard, card["id"])
    assert stored.total_reviews == 0


def test_reviewing_another_users_card_is_not_found(client, auth_headers, other_auth_headers, deck, session):
    card = create_card(client, auth_headers, deck.id)

    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 5},
        headers=other_auth_headers,
    )

    assert response.status_code == 404
    stored = session.get(Flashcard, card["id"])
    session.refresh(stored)
    assert stored.total_reviews == 0


def test_reviewing_missing_card_is_not_found(client, auth_headers):
    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": 4040, "quality": 3},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()["type"] == "NotFoundError"


def test_reviewing_suspended_card_conflicts(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)
    client.post(f"{API}/flashcards/suspend", json={"ids": [card["id"]]}, headers=auth_headers)

    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 5},
        headers=auth_headers,
    )

    assert response.status_code == 409
    history = client.get(f"{API}/flashcards/{card['id']}/reviews", headers=auth_headers).json()
    assert history["reviews"] == []


def test_review_history_is_newest_first(client, auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)
    for quality in (5, 2):
        client.post(
            f"{API}/flashcards/review",
            json={"flashcard_id": card["id"], "quality": quality},
            headers=auth_headers,
        )

    response = client.get(f"{API}/flashcards/{card['id']}/reviews", headers=auth_headers)

    assert response.status_code == 200
    reviews = response.json()["reviews"]
    assert [review["quality"] for review in reviews] == [2, 5]
    lapse, first = reviews
    assert first["previous_repetitions"] == 0
    assert first["new_repetitions"] == 1
    assert lapse["previous_repetitions"] == 1
    assert lapse["new_repetitions"] == 0
    assert lapse["previous_ease_factor"] == 2.6
    assert lapse["new_ease_factor"] == 2.6


def test_review_history_of_another_users_card_is_not_found(client, auth_headers, other_auth_headers, deck):
    card = create_card(client, auth_headers, deck.id)

    response = client.get(f"{API}/flashcards/{card['id']}/reviews", headers=other_auth_headers)

    assert response.status_code == 404


def test_storage_failure_returns_500_without_details_or_writes(client, auth_headers, deck, session, monkeypatch):
    card = create_card(client, auth_headers, deck.id)

    def commit():
        session.flush()
        raise OperationalError("INSERT INTO flashcard_review", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", commit)
    response = client.post(
        f"{API}/flashcards/review",
        json={"flashcard_id": card["id"], "quality": 5},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to save review", "type": "PersistenceError"}
    assert session.exec(select(FlashcardReview)).all() == []
    stored = session.get(Flashcard, card["id"])
    assert stored.total_reviews == 0
    assert stored.repetitions == 0
    assert stored.status == "new"
