"""Tests for review submission: sequencing, guards and the unit-of-work behaviour."""

from dataclasses import asdict
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from wardnotes.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from wardnotes.models import Flashcard, FlashcardReview
from wardnotes.services.review_repository import ReviewRepository, SQLModelReviewRepository
from wardnotes.services.review_service import submit_review, validate_quality

NOW = datetime(2026, 5, 2, 8, 0, tzinfo=timezone.utc)


class RecordingRepository(ReviewRepository):
    """In-memory repository that records calls and applies writes only on commit."""

    def __init__(self, card=None, commit_error=None):
        self.card = card
        self.commit_error = commit_error
        self.calls = []
        self.logs = []
        self._pending_log = None
        self._pending_state = None

    def get_card_state(self, flashcard_id):
        self.calls.append("get_card_state")
        if self.card is not None and self.card.id == flashcard_id:
            return self.card
        return None

    def append_review_log(self, entry):
        self.calls.append("append_review_log")
        self._pending_log = entry
        return entry

    def update_card_state(self, flashcard_id, state):
        self.calls.append("update_card_state")
        self._pending_state = state
        return self.card

    def commit(self):
        self.calls.append("commit")
        if self.commit_error:
            raise self.commit_error
        self.logs.append(self._pending_log)
        for field, value in asdict(self._pending_state).items():
            setattr(self.card, field, value)

    def rollback(self):
        self.calls.append("rollback")
        self._pending_log = None
        self._pending_state = None


def make_card(**overrides):
    values = dict(
        id=7,
        deck_id=1,
        user_id=1,
        front_content="Causes of raised anion gap acidosis?",
        back_content="MUDPILES",
        status="review",
        ease_factor=2.5,
        interval_days=6,
        repetitions=2,
        total_reviews=2,
        correct_reviews=2,
        next_review=NOW,
    )
    values.update(overrides)
    return Flashcard(**values)


def test_review_runs_steps_in_order():
    repository = RecordingRepository(make_card())

    card = submit_review(repository, 7, 5, response_time=4.2, now=NOW)

    assert repository.calls == ["get_card_state", "append_review_log", "update_card_state", "commit"]
    assert card.repetitions == 3
    assert card.interval_days == 15
    assert card.ease_factor == pytest.approx(2.6)
    assert card.status == "review"
    assert card.last_reviewed == NOW
    assert card.next_review == NOW + timedelta(days=15)
    assert card.total_reviews == 3
    assert card.correct_reviews == 3


def test_review_log_records_state_before_and_after():
    repository = RecordingRepository(make_card())

    submit_review(repository, 7, 2, response_time=11.0, now=NOW)

    [log] = repository.logs
    assert log.flashcard_id == 7
    assert log.user_id == 1
    assert log.quality == 2
    assert log.response_time == 11.0
    assert log.reviewed_at == NOW
    assert (log.previous_ease_factor, log.previous_interval, log.previous_repetitions) == (2.5, 6, 2)
    assert (log.new_ease_factor, log.new_interval, log.new_repetitions) == (2.5, 1, 0)


def test_lapse_counts_review_but_not_correct():
    repository = RecordingRepository(make_card())

    card = submit_review(repository, 7, 1, now=NOW)

    assert card.status == "learning"
    assert card.total_reviews == 3
    assert card.correct_reviews == 2


def test_missing_card_is_not_found_and_writes_nothing():
    repository = RecordingRepository(make_card())

    with pytest.raises(NotFoundError):
        submit_review(repository, 99, 4, now=NOW)

    assert repository.calls == ["get_card_state"]


def test_suspended_card_is_rejected_without_writes():
    repository = RecordingRepository(make_card(status="suspended"))

    with pytest.raises(ConflictError):
        submit_review(repository, 7, 4, now=NOW)

    assert repository.calls == ["get_card_state"]
    assert repository.card.total_reviews == 2


@pytest.mark.parametrize("quality", [-1, 6, 2.5, "4", None, True])
def test_invalid_quality_is_rejected_before_any_read(quality):
    repository = RecordingRepository(make_card())

    with pytest.raises(ValidationError):
        submit_review(repository, 7, quality, now=NOW)

    assert repository.calls == []


@pytest.mark.parametrize("quality", [0, 3, 5])
def test_validate_quality_accepts_boundaries(quality):
    validate_quality(quality)


def test_storage_failure_rolls_back_and_leaves_card_untouched():
    error = OperationalError("INSERT INTO flashcard_review", {}, Exception("disk I/O error"))
    repository = RecordingRepository(make_card(), commit_error=error)

    with pytest.raises(PersistenceError):
        submit_review(repository, 7, 5, now=NOW)

    assert repository.calls[-1] == "rollback"
    assert repository.logs == []
    assert repository.card.repetitions == 2
    assert repository.card.interval_days == 6
    assert repository.card.total_reviews == 2


def test_review_time_in_another_zone_is_stored_as_utc():
    repository = RecordingRepository(make_card())
    aware = datetime(2026, 5, 2, 10, 0, tzinfo=timezone(timedelta(hours=2)))

    card = submit_review(repository, 7, 4, now=aware)

    assert card.last_reviewed == NOW
    assert card.last_reviewed.utcoffset() == timedelta(0)


def test_naive_review_time_is_treated_as_utc():
    repository = RecordingRepository(make_card())

    card = submit_review(repository, 7, 4, now=datetime(2026, 5, 2, 8, 0))

    assert card.last_reviewed == NOW


def test_sqlmodel_repository_persists_review_and_card(session, user, deck):
    card = Flashcard(deck_id=deck.id, user_id=user.id, front_content="Q", back_content="A")
    session.add(card)
    session.commit()
    session.refresh(card)

    repository = SQLModelReviewRepository(session, user.id)
    updated = submit_review(repository, card.id, 4, now=NOW)

    assert updated.id == card.id
    assert updated.status == "learning"
    assert updated.repetitions == 1
    assert updated.interval_days == 1

    reviews = session.exec(select(FlashcardReview).where(FlashcardReview.flashcard_id == card.id)).all()
    assert len(reviews) == 1
    assert reviews[0].new_repetitions == 1


def test_sqlmodel_repository_hides_other_users_cards(session, user, other_user, deck):
    card = Flashcard(deck_id=deck.id, user_id=user.id, front_content="Q", back_content="A")
    session.add(card)
    session.commit()
    session.refresh(card)

    repository = SQLModelReviewRepository(session, other_user.id)
    with pytest.raises(NotFoundError):
        submit_review(repository, card.id, 5, now=NOW)

    session.refresh(card)
    assert card.total_reviews == 0
    assert session.exec(select(FlashcardReview)).all() == []


def test_sqlmodel_repository_refuses_foreign_review_log(session, user, other_user):
    repository = SQLModelReviewRepository(session, user.id)
    entry = FlashcardReview(
        flashcard_id=1,
        user_id=other_user.id,
        quality=3,
        previous_ease_factor=2.5,
        previous_interval=0,
        previous_repetitions=0,
        new_ease_factor=2.36,
        new_interval=1,
        new_repetitions=1,
    )

    with pytest.raises(ValueError):
        repository.append_review_log(entry)


def failing_commit(session):
    """A commit that flushes pending writes and then fails, like a dropped connection."""
    def commit():
        session.flush()
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
    return commit


def test_sqlmodel_repository_rolls_back_flushed_review_on_commit_failure(session, user, deck, monkeypatch):
    card = Flashcard(deck_id=deck.id, user_id=user.id, front_content="Q", back_content="A")
    session.add(card)
    session.commit()
    session.refresh(card)
    card_id = card.id

    monkeypatch.setattr(session, "commit", failing_commit(session))
    repository = SQLModelReviewRepository(session, user.id)
    with pytest.raises(PersistenceError) as excinfo:
        submit_review(repository, card_id, 5, now=NOW)

    assert str(excinfo.value) == "Failed to save review"
    assert session.exec(select(FlashcardReview)).all() == []
    stored = session.get(Flashcard, card_id)
    assert stored.status == "new"
    assert stored.repetitions == 0
    assert stored.total_reviews == 0
    assert stored.last_reviewed is None


def test_sqlmodel_repository_round_trips_aware_timestamps(session, user, deck):
    card = Flashcard(deck_id=deck.id, user_id=user.id, front_content="Q", back_content="A")
    session.add(card)
    session.commit()

    submit_review(SQLModelReviewRepository(session, user.id), card.id, 4, now=NOW)
    session.expire_all()

    stored = session.get(Flashcard, card.id)
    assert stored.last_reviewed == NOW
    assert stored.next_review == NOW + timedelta(days=1)
    assert stored.next_review.utcoffset() == timedelta(0)
    [review] = session.exec(select(FlashcardReview)).all()
    assert review.reviewed_at == NOW
