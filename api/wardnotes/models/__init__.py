"""
Models package - imports all models so they are registered with SQLModel.
"""
# Import enums first
from wardnotes.models.enums import FlashcardStatus, FlashcardType

# Import all models
from wardnotes.models.user import User
from wardnotes.models.deck import FlashcardDeck
from wardnotes.models.flashcard import Flashcard
from wardnotes.models.flashcard_review import FlashcardReview

__all__ = [
    'FlashcardStatus',
    'FlashcardType',
    'User',
    'FlashcardDeck',
    'Flashcard',
    'FlashcardReview',
]
