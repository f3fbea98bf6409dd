"""
Study analytics computed from the review log.
"""
import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Optional

from sqlmodel import Session, select

from wardnotes.models.flashcard_review import FlashcardReview
from wardnotes.schemas.analytics import DailyReviewStats, StudyAnalyticsResponse
from wardnotes.services.srs_service import is_correct, round_half_up
from wardnotes.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return float(round_half_up(part * 100 / whole, 2))


def calculate_streak(review_days: Iterable[date], today: date) -> int:
    """
    Count consecutive days with at least one review, ending today.

    If nothing has been reviewed yet today the streak is counted back from yesterday,
    so an unfinished day does not reset it.

    Args:
        review_days: Days on which reviews happened
        today: Current day

    Returns:
        Length of the streak in days
    """
    days = set(review_days)
    check_day = today if today in days else today - timedelta(days=1)

    streak = 0
    while check_day in days:
        streak += 1
        check_day -= timedelta(days=1)
    return streak


def get_study_analytics(
    session: Session,
    user_id: int,
    days: int = 30,
    now: Optional[datetime] = None
) -> StudyAnalyticsResponse:
    """
    Summarize a user's reviews over the last `days` days.

    Args:
        session: Database session
        user_id: User whose reviews to summarize
        days: Size of the trailing window in days
        now: Reference time (defaults to now, UTC)

    Returns:
        StudyAnalyticsResponse with totals, accuracy, streak and per-day stats
    """
    now = to_utc(now) if now is not None else utc_now()
    start = now - timedelta(days=days)

    reviews = session.exec(
        select(FlashcardReview.reviewed_at, FlashcardReview.quality)
        .where(
            FlashcardReview.user_id == user_id,
            FlashcardReview.reviewed_at >= start
        )
        .order_by(FlashcardReview.reviewed_at)  # type: ignore
    ).all()

    per_day: Dict[date, Dict[str, int]] = OrderedDict()
    correct_total = 0
    for reviewed_at, quality in reviews:
        day = per_day.setdefault(reviewed_at.date(), {'reviews': 0, 'correct': 0})
        day['reviews'] += 1
        if is_correct(quality):
            day['correct'] += 1
            correct_total += 1

    # Streaks can extend past the window, so look them up across the whole log
    all_days = session.exec(
        select(FlashcardReview.reviewed_at).where(FlashcardReview.user_id == user_id)
    ).all()
    streak = calculate_streak((reviewed_at.date() for reviewed_at in all_days), now.date())

    daily_stats = [
        DailyReviewStats(
            date=day.isoformat(),
            reviews=counts['reviews'],
            accuracy=_percentage(counts['correct'], counts['reviews'])
        )
        for day, counts in per_day.items()
    ]

    logger.info(f"Study analytics for user {user_id}: {len(reviews)} reviews in {days} days, streak {streak}")
    return StudyAnalyticsResponse(
        days=days,
        total_reviews=len(reviews),
        accuracy=_percentage(correct_total, len(reviews)),
        streak=streak,
        daily_stats=daily_stats,
    )
