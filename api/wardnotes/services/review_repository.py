"""
Repository used by the review flow.

Keeps the review sequencing in review_service independent of how cards and review
logs are stored. The SQLModel implementation is scoped to a single user, so a card
owned by someone else looks exactly like a missing one.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from wardnotes.core.exceptions import NotFoundError
from wardnotes.models.flashcard import Flashcard
from wardnotes.models.flashcard_review import FlashcardReview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardStateUpdate:
    """Scheduling fields written back to a flashcard after a review."""
    status: str
    ease_factor: float
    interval_days: int
    repetitions: int
    last_reviewed: datetime
    next_review: datetime
    total_reviews: int
    correct_reviews: int
    updated_at: datetime


class ReviewRepository(ABC):
    """Storage operations needed to record one review."""

    @abstractmethod
    def get_card_state(self, flashcard_id: int) -> Optional[Flashcard]:
        """Return the flashcard with its current scheduling state, or None."""

    @abstractmethod
    def append_review_log(self, entry: FlashcardReview) -> FlashcardReview:
        """Add an immutable review log entry to the current unit of work."""

    @abstractmethod
    def update_card_state(self, flashcard_id: int, state: CardStateUpdate) -> Flashcard:
        """Write new scheduling state to a flashcard in the current unit of work."""

    @abstractmethod
    def commit(self) -> None:
        """Persist everything added since the last commit."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard everything added since the last commit."""


class SQLModelReviewRepository(ReviewRepository):
    """ReviewRepository backed by a SQLModel session, restricted to one user's cards."""

    def __init__(self, session: Session, user_id: int):
        self.session = session
        self.user_id = user_id

    def get_card_state(self, flashcard_id: int) -> Optional[Flashcard]:
        return self.session.exec(
            select(Flashcard).where(
                Flashcard.id == flashcard_id,
                Flashcard.user_id == self.user_id
            )
        ).first()

    def append_review_log(self, entry: FlashcardReview) -> FlashcardReview:
        if entry.user_id != self.user_id:
            raise ValueError(
                f"Review log for user {entry.user_id} cannot be written by repository for user {self.user_id}"
            )
        self.session.add(entry)
        return entry

    def update_card_state(self, flashcard_id: int, state: CardStateUpdate) -> Flashcard:
        flashcard = self.get_card_state(flashcard_id)
        if not flashcard:
            raise NotFoundError(f"Flashcard with id {flashcard_id} not found")

        flashcard.status = state.status
        flashcard.ease_factor = state.ease_factor
        flashcard.interval_days = state.interval_days
        flashcard.repetitions = state.repetitions
        flashcard.last_reviewed = state.last_reviewed
        flashcard.next_review = state.next_review
        flashcard.total_reviews = state.total_reviews
        flashcard.correct_reviews = state.correct_reviews
        flashcard.updated_at = state.updated_at
        self.session.add(flashcard)
        return flashcard

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
