"""
FlashcardDeck model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from wardnotes.utils.time_utils import utc_now

if TYPE_CHECKING:
    from wardnotes.models.user import User
    from wardnotes.models.flashcard import Flashcard

DEFAULT_DECK_COLOR = "#3B82F6"


class FlashcardDeck(SQLModel, table=True):
    """FlashcardDeck table - a user's named collection of flashcards."""
    __tablename__ = "flashcard_deck"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    description: Optional[str] = None
    color: str = Field(default=DEFAULT_DECK_COLOR)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Relationships
    user: "User" = Relationship(back_populates="decks")
    flashcards: List["Flashcard"] = Relationship(back_populates="deck")
