"""
Study analytics schemas.
"""
from pydantic import BaseModel
from typing import List


class DailyReviewStats(BaseModel):
    """Reviews on a single day."""
    date: str  # ISO format date string (YYYY-MM-DD)
    reviews: int
    accuracy: float  # Percentage of reviews with quality >= 3


class StudyAnalyticsResponse(BaseModel):
    """Review analytics over a trailing window of days."""
    days: int
    total_reviews: int
    accuracy: float
    streak: int  # Consecutive days with at least one review
    daily_stats: List[DailyReviewStats]
