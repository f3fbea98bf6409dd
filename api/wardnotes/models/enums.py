"""
Model enums.
"""
from enum import Enum


class FlashcardStatus(str, Enum):
    """Scheduling status of a flashcard.

    SUSPENDED is only ever set by an explicit user action, never by the scheduler.
    """
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MATURE = "mature"
    SUSPENDED = "suspended"


class FlashcardType(str, Enum):
    """Flashcard layout."""
    FRONT_BACK = "front_back"
    CLOZE = "cloze"
