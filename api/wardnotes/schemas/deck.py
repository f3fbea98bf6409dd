"""
Deck schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from wardnotes.models.deck import DEFAULT_DECK_COLOR

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class DeckResponse(BaseModel):
    """Deck response schema."""
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    color: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CreateDeckRequest(BaseModel):
    """Request schema for creating a deck."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    color: str = Field(DEFAULT_DECK_COLOR, pattern=HEX_COLOR_PATTERN)


class UpdateDeckRequest(BaseModel):
    """Request schema for updating a deck."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class DecksResponse(BaseModel):
    """Response schema for decks list."""
    decks: List[DeckResponse]


class DeckStats(BaseModel):
    """Card counts for a deck by scheduling status."""
    total_cards: int = 0
    new_cards: int = 0
    due_cards: int = 0  # New cards plus learning/review/mature cards whose next review has passed
    learning_cards: int = 0
    review_cards: int = 0
    mature_cards: int = 0
    suspended_cards: int = 0


class DeckStatsResponse(BaseModel):
    """Response schema for deck statistics."""
    deck_id: int
    stats: DeckStats
