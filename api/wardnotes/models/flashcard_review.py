"""
FlashcardReview model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from wardnotes.utils.time_utils import utc_now

if TYPE_CHECKING:
    from wardnotes.models.flashcard import Flashcard


class FlashcardReview(SQLModel, table=True):
    """FlashcardReview table - append-only log of review submissions.

    Stores the scheduling state before and after each review.
    """
    __tablename__ = "flashcard_review"

    id: Optional[int] = Field(default=None, primary_key=True)
    flashcard_id: int = Field(foreign_key="flashcard.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    reviewed_at: datetime = Field(default_factory=utc_now, index=True)
    quality: int  # 0-5, >= 3 counts as correct
    response_time: Optional[float] = None  # Seconds, as reported by the client

    previous_ease_factor: float
    previous_interval: int
    previous_repetitions: int
    new_ease_factor: float
    new_interval: int
    new_repetitions: int

    # Relationships
    flashcard: "Flashcard" = Relationship(back_populates="reviews")
