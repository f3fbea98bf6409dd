"""
SRS (Spaced Repetition System) service implementing an SM-2 variant.

The functions here are pure: they take a quality rating and a card's current
scheduling state and return the next state. Persistence and sequencing live in
review_service.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from wardnotes.models.enums import FlashcardStatus
from wardnotes.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


MIN_QUALITY = 0
MAX_QUALITY = 5
# Quality ratings at or above this count as a correct recall
PASSING_QUALITY = 3

MIN_EASE_FACTOR = Decimal("1.3")

# Intervals (days) for the first and second consecutive successful recall
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
# Interval after a lapse
LAPSE_INTERVAL_DAYS = 1

# Repetition thresholds for status promotion
REVIEW_REPETITIONS = 2
MATURE_REPETITIONS = 5


@dataclass(frozen=True)
class ReviewSchedule:
    """Output of compute_next_review."""
    new_ease_factor: float
    new_interval: int
    new_repetitions: int
    next_review_date: datetime


def round_half_up(value: Union[int, float, Decimal], places: int = 0) -> Decimal:
    """
    Round a number half-up (away from zero on .5) to a fixed number of decimal places.

    Floats are converted through their shortest decimal representation first,
    so 2.675 rounds to 2.68 rather than inheriting binary floating point error.

    Args:
        value: Number to round
        places: Number of decimal places to keep (0 for an integer result)

    Returns:
        Rounded Decimal
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def is_correct(quality: int) -> bool:
    """Whether a quality rating counts as a correct recall."""
    return quality >= PASSING_QUALITY


def update_ease_factor(ease_factor: Union[float, Decimal], quality: int) -> Decimal:
    """
    Apply the SM-2 ease factor update for a correct response.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.
    Quality 5 raises the ease, 4 keeps it, 3 lowers it by 0.14.

    Args:
        ease_factor: Current ease factor
        quality: Quality rating of the review

    Returns:
        Updated ease factor (unrounded)
    """
    miss = Decimal(MAX_QUALITY - quality)
    delta = Decimal("0.1") - miss * (Decimal("0.08") + miss * Decimal("0.02"))
    new_ease_factor = Decimal(str(ease_factor)) + delta
    return max(new_ease_factor, MIN_EASE_FACTOR)


def calculate_interval(new_repetitions: int, interval_days: int, ease_factor: Union[float, Decimal]) -> int:
    """
    Interval in days after a successful recall.

    Args:
        new_repetitions: Consecutive correct reviews including this one
        interval_days: Interval that led up to this review
        ease_factor: Ease factor before this review

    Returns:
        Next interval in whole days
    """
    if new_repetitions == 1:
        return FIRST_INTERVAL_DAYS
    if new_repetitions == 2:
        return SECOND_INTERVAL_DAYS
    return int(round_half_up(Decimal(interval_days) * Decimal(str(ease_factor))))


def compute_next_review(
    quality: int,
    ease_factor: float,
    interval_days: int,
    repetitions: int,
    now: Optional[datetime] = None,
) -> ReviewSchedule:
    """
    Compute the next scheduling state of a card from a review outcome.

    A correct response (quality >= 3) extends the repetition streak and grows the
    interval (1 day, 6 days, then interval * ease factor). A lapse resets the
    streak and schedules the card for tomorrow, leaving the ease factor untouched.

    Inputs are expected to be within their documented ranges (quality 0-5,
    ease factor >= 1.3, non-negative interval and repetitions); the caller
    validates them. The only clamp applied here is the ease factor floor.

    Args:
        quality: Quality rating of the review (0-5)
        ease_factor: Current ease factor
        interval_days: Current interval in days
        repetitions: Current count of consecutive correct reviews
        now: Review time (defaults to now, UTC)

    Returns:
        ReviewSchedule with the new ease factor (rounded to 2 decimals when changed),
        interval, repetition count and next review date (now + interval days)
    """
    if now is None:
        now = utc_now()

    if is_correct(quality):
        new_repetitions = repetitions + 1
        new_interval = calculate_interval(new_repetitions, interval_days, ease_factor)
        new_ease_factor = float(round_half_up(update_ease_factor(ease_factor, quality), 2))
    else:
        new_repetitions = 0
        new_interval = LAPSE_INTERVAL_DAYS
        new_ease_factor = ease_factor

    return ReviewSchedule(
        new_ease_factor=new_ease_factor,
        new_interval=new_interval,
        new_repetitions=new_repetitions,
        next_review_date=now + timedelta(days=new_interval),
    )


def determine_status(repetitions: int, quality: int) -> FlashcardStatus:
    """
    Determine a card's status after a review.

    Any lapse demotes the card to learning regardless of its history. Otherwise the
    status follows the repetition streak: fewer than 2 is learning, fewer than 5 is
    review, anything longer is mature. Never returns SUSPENDED.

    Args:
        repetitions: Repetition count after the review
        quality: Quality rating of the review

    Returns:
        New FlashcardStatus
    """
    if not is_correct(quality):
        return FlashcardStatus.LEARNING

    if repetitions < REVIEW_REPETITIONS:
        return FlashcardStatus.LEARNING
    elif repetitions < MATURE_REPETITIONS:
        return FlashcardStatus.REVIEW
    else:
        return FlashcardStatus.MATURE
