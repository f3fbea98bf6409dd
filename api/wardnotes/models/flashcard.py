"""
Flashcard model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from wardnotes.models.enums import FlashcardStatus, FlashcardType
from wardnotes.utils.time_utils import utc_now

if TYPE_CHECKING:
    from wardnotes.models.user import User
    from wardnotes.models.deck import FlashcardDeck
    from wardnotes.models.flashcard_review import FlashcardReview

DEFAULT_EASE_FACTOR = 2.5


class Flashcard(SQLModel, table=True):
    """Flashcard table - card content plus its spaced repetition state."""
    __tablename__ = "flashcard"

    id: Optional[int] = Field(default=None, primary_key=True)
    deck_id: int = Field(foreign_key="flashcard_deck.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    note_id: Optional[str] = None  # Source clinical note, if generated from one

    # Card content
    card_type: str = Field(default=FlashcardType.FRONT_BACK.value)  # FlashcardType value
    front_content: Optional[str] = None
    back_content: Optional[str] = None
    cloze_content: Optional[str] = None
    tags: str = Field(default="")  # Comma-separated tags

    # Spaced repetition state (written only by a review, see review_service)
    status: str = Field(default=FlashcardStatus.NEW.value, index=True)  # FlashcardStatus value
    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR)
    interval_days: int = Field(default=0)
    repetitions: int = Field(default=0)
    last_reviewed: Optional[datetime] = None
    next_review: datetime = Field(default_factory=utc_now, index=True)

    # Statistics
    total_reviews: int = Field(default=0)
    correct_reviews: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Relationships
    user: "User" = Relationship(back_populates="flashcards")
    deck: "FlashcardDeck" = Relationship(back_populates="flashcards")
    reviews: List["FlashcardReview"] = Relationship(back_populates="flashcard")

    @property
    def tag_list(self) -> List[str]:
        return [tag for tag in self.tags.split(",") if tag]
