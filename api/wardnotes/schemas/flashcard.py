"""
Flashcard schemas.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime
from wardnotes.models.enums import FlashcardStatus, FlashcardType
from wardnotes.schemas.utils import normalize_tags


class FlashcardResponse(BaseModel):
    """Flashcard response schema, including its scheduling state."""
    id: int
    deck_id: int
    user_id: int
    note_id: Optional[str] = None
    card_type: FlashcardType
    front_content: Optional[str] = None
    back_content: Optional[str] = None
    cloze_content: Optional[str] = None
    tags: List[str] = []
    status: FlashcardStatus
    ease_factor: float
    interval_days: int
    repetitions: int
    last_reviewed: Optional[datetime] = None
    next_review: datetime
    total_reviews: int
    correct_reviews: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator('tags', mode='before')
    @classmethod
    def split_tags(cls, v):
        return normalize_tags(v)


class CreateFlashcardRequest(BaseModel):
    """Request schema for creating a flashcard."""
    deck_id: int = Field(..., description="Deck the card belongs to")
    note_id: Optional[str] = Field(None, description="Source note ID, if generated from a note")
    card_type: FlashcardType = Field(FlashcardType.FRONT_BACK, description="'front_back' or 'cloze'")
    front_content: Optional[str] = None
    back_content: Optional[str] = None
    cloze_content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v):
        return normalize_tags(v)

    @model_validator(mode='after')
    def check_content(self):
        if self.card_type == FlashcardType.CLOZE:
            if not (self.cloze_content and self.cloze_content.strip()):
                raise ValueError("cloze_content is required for cloze cards")
        elif not (self.front_content and self.front_content.strip()):
            raise ValueError("front_content is required for front_back cards")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "deck_id": 1,
                "card_type": "front_back",
                "front_content": "First-line treatment for anaphylaxis?",
                "back_content": "IM adrenaline 0.5 mg (1:1000)",
                "tags": ["emergency", "pharmacology"]
            }
        }


class BulkCreateFlashcardsRequest(BaseModel):
    """Request schema for creating several flashcards at once."""
    cards: List[CreateFlashcardRequest] = Field(..., min_length=1)


class UpdateFlashcardRequest(BaseModel):
    """Request schema for updating flashcard content.

    Scheduling fields are not accepted here; they only change through a review.
    """
    front_content: Optional[str] = None
    back_content: Optional[str] = None
    cloze_content: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v):
        if v is None:
            return None
        return normalize_tags(v)


class FlashcardIdsRequest(BaseModel):
    """Request schema for bulk operations on flashcards (delete, suspend, unsuspend)."""
    ids: List[int] = Field(..., min_length=1)


class FlashcardsResponse(BaseModel):
    """Response schema for a list of flashcards."""
    flashcards: List[FlashcardResponse]


class FlashcardEnvelope(BaseModel):
    """Response schema wrapping a single flashcard."""
    flashcard: FlashcardResponse


class BulkOperationResponse(BaseModel):
    """Response schema for bulk operations."""
    message: str
    affected_count: int
