"""
Review schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class SubmitReviewRequest(BaseModel):
    """Request to record a review of a flashcard."""
    flashcard_id: int = Field(..., description="Reviewed flashcard ID")
    quality: int = Field(..., ge=0, le=5, description="Recall quality: 0-2 forgotten, 3-5 remembered")
    response_time: Optional[float] = Field(None, ge=0, description="Time taken to answer, in seconds")

    class Config:
        json_schema_extra = {
            "example": {
                "flashcard_id": 42,
                "quality": 4,
                "response_time": 6.5
            }
        }


class FlashcardReviewResponse(BaseModel):
    """A single review log entry."""
    id: int
    flashcard_id: int
    user_id: int
    reviewed_at: datetime
    quality: int
    response_time: Optional[float] = None
    previous_ease_factor: float
    previous_interval: int
    previous_repetitions: int
    new_ease_factor: float
    new_interval: int
    new_repetitions: int

    class Config:
        from_attributes = True


class ReviewHistoryResponse(BaseModel):
    """Review history of a flashcard, newest first."""
    reviews: List[FlashcardReviewResponse]
