"""
Review submission service.

Sequences a single review as one unit of work:
read card state -> compute schedule -> append review log -> update card -> commit.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from wardnotes.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from wardnotes.models.enums import FlashcardStatus
from wardnotes.models.flashcard import Flashcard
from wardnotes.models.flashcard_review import FlashcardReview
from wardnotes.services.review_repository import CardStateUpdate, ReviewRepository
from wardnotes.services.srs_service import (
    MAX_QUALITY,
    MIN_QUALITY,
    compute_next_review,
    determine_status,
    is_correct,
)
from wardnotes.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


def validate_quality(quality: int) -> None:
    """Raise ValidationError unless quality is an integer in [0, 5]."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ValidationError(f"quality must be an integer between {MIN_QUALITY} and {MAX_QUALITY}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValidationError(
            f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )


def submit_review(
    repository: ReviewRepository,
    flashcard_id: int,
    quality: int,
    response_time: Optional[float] = None,
    now: Optional[datetime] = None,
) -> Flashcard:
    """
    Record a review of a flashcard and reschedule it.

    Nothing is written unless the card exists, belongs to the repository's user and
    is not suspended. The review log and the card update are committed together; on
    a storage failure both are rolled back.

    Args:
        repository: ReviewRepository scoped to the reviewing user
        flashcard_id: ID of the reviewed flashcard
        quality: Quality rating (0-5)
        response_time: Optional time the user took to answer, in seconds
        now: Review time (defaults to now, UTC)

    Returns:
        The updated Flashcard

    Raises:
        ValidationError: If quality is out of range
        NotFoundError: If the flashcard does not exist or is not owned by the user
        ConflictError: If the flashcard is suspended
        PersistenceError: If writing the review log or the card update fails
    """
    validate_quality(quality)
    now = to_utc(now) if now is not None else utc_now()

    flashcard = repository.get_card_state(flashcard_id)
    if not flashcard:
        raise NotFoundError(f"Flashcard with id {flashcard_id} not found")

    if flashcard.status == FlashcardStatus.SUSPENDED.value:
        raise ConflictError(f"Flashcard {flashcard_id} is suspended and cannot be reviewed")

    previous_ease_factor = flashcard.ease_factor
    previous_interval = flashcard.interval_days
    previous_repetitions = flashcard.repetitions

    schedule = compute_next_review(
        quality,
        previous_ease_factor,
        previous_interval,
        previous_repetitions,
        now=now,
    )
    new_status = determine_status(schedule.new_repetitions, quality)

    review = FlashcardReview(
        flashcard_id=flashcard.id,
        user_id=flashcard.user_id,
        reviewed_at=now,
        quality=quality,
        response_time=response_time,
        previous_ease_factor=previous_ease_factor,
        previous_interval=previous_interval,
        previous_repetitions=previous_repetitions,
        new_ease_factor=schedule.new_ease_factor,
        new_interval=schedule.new_interval,
        new_repetitions=schedule.new_repetitions,
    )
    state = CardStateUpdate(
        status=new_status.value,
        ease_factor=schedule.new_ease_factor,
        interval_days=schedule.new_interval,
        repetitions=schedule.new_repetitions,
        last_reviewed=now,
        next_review=schedule.next_review_date,
        total_reviews=flashcard.total_reviews + 1,
        correct_reviews=flashcard.correct_reviews + (1 if is_correct(quality) else 0),
        updated_at=now,
    )

    try:
        repository.append_review_log(review)
        updated = repository.update_card_state(flashcard_id, state)
        repository.commit()
    except SQLAlchemyError as e:
        repository.rollback()
        logger.error(f"Error saving review of flashcard {flashcard_id}: {str(e)}")
        raise PersistenceError("Failed to save review") from e

    logger.info(
        f"Reviewed flashcard {flashcard_id} with quality {quality}: "
        f"ease {previous_ease_factor} -> {schedule.new_ease_factor}, "
        f"interval {previous_interval} -> {schedule.new_interval}, "
        f"repetitions {previous_repetitions} -> {schedule.new_repetitions}, "
        f"status {new_status.value}, next review {schedule.next_review_date.isoformat()}"
    )
    return updated
