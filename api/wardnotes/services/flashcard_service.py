"""
Flashcard service: card CRUD, review queues and suspension.

Scheduling fields are never written here; a flashcard's ease factor, interval,
repetitions and next review only change through review_service.
"""
# pyright: reportAttributeAccessIssue=false
import logging
import random
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from wardnotes.core.exceptions import NotFoundError
from wardnotes.models.enums import FlashcardStatus, FlashcardType
from wardnotes.models.flashcard import DEFAULT_EASE_FACTOR, Flashcard
from wardnotes.models.flashcard_review import FlashcardReview
from wardnotes.schemas.flashcard import CreateFlashcardRequest, UpdateFlashcardRequest
from wardnotes.schemas.utils import join_tags
from wardnotes.services.deck_service import get_user_deck
from wardnotes.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally (escape character is a backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_user_flashcard(session: Session, user_id: int, flashcard_id: int) -> Flashcard:
    """
    Get a flashcard owned by the user.

    Raises:
        NotFoundError: If the flashcard does not exist or belongs to another user
    """
    flashcard = session.exec(
        select(Flashcard).where(
            Flashcard.id == flashcard_id,
            Flashcard.user_id == user_id
        )
    ).first()
    if not flashcard:
        raise NotFoundError(f"Flashcard with id {flashcard_id} not found")
    return flashcard


def build_flashcard(user_id: int, request: CreateFlashcardRequest, now: Optional[datetime] = None) -> Flashcard:
    """Build a new flashcard with default scheduling state (new, due immediately)."""
    now = to_utc(now) if now is not None else utc_now()
    return Flashcard(
        deck_id=request.deck_id,
        user_id=user_id,
        note_id=request.note_id,
        card_type=request.card_type.value,
        front_content=request.front_content,
        back_content=request.back_content,
        cloze_content=request.cloze_content,
        tags=join_tags(request.tags),
        status=FlashcardStatus.NEW.value,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval_days=0,
        repetitions=0,
        next_review=now,
        total_reviews=0,
        correct_reviews=0,
        created_at=now,
        updated_at=now,
    )


def create_flashcards(
    session: Session,
    user_id: int,
    requests: List[CreateFlashcardRequest]
) -> List[Flashcard]:
    """
    Create one or more flashcards in a single transaction.

    Every referenced deck must belong to the user.
    """
    for deck_id in {request.deck_id for request in requests}:
        get_user_deck(session, user_id, deck_id)

    now = utc_now()
    flashcards = [build_flashcard(user_id, request, now) for request in requests]
    for flashcard in flashcards:
        session.add(flashcard)
    session.commit()
    for flashcard in flashcards:
        session.refresh(flashcard)

    logger.info(f"Created {len(flashcards)} flashcard(s) for user {user_id}")
    return flashcards


def list_flashcards(
    session: Session,
    user_id: int,
    deck_id: Optional[int] = None,
    status: Optional[FlashcardStatus] = None,
    card_type: Optional[FlashcardType] = None,
    tag: Optional[str] = None,
    due_only: bool = False,
    search: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Flashcard]:
    """
    List a user's flashcards with optional filters.

    Args:
        session: Database session
        user_id: Owner of the cards
        deck_id: Only cards in this deck
        status: Only cards with this status
        card_type: Only cards of this type
        tag: Only cards carrying this tag
        due_only: Only unsuspended cards whose next review has passed
        search: Case-insensitive substring match on front, back or cloze content
        now: Reference time for due_only (defaults to now, UTC)

    Returns:
        Flashcards ordered by creation time, oldest first
    """
    query = select(Flashcard).where(Flashcard.user_id == user_id)
    if deck_id is not None:
        query = query.where(Flashcard.deck_id == deck_id)
    if status is not None:
        query = query.where(Flashcard.status == status.value)
    if card_type is not None:
        query = query.where(Flashcard.card_type == card_type.value)
    if due_only:
        query = query.where(
            Flashcard.next_review <= (to_utc(now) if now is not None else utc_now()),
            Flashcard.status != FlashcardStatus.SUSPENDED.value
        )
    if search:
        pattern = f"%{escape_like(search.strip())}%"
        query = query.where(
            or_(
                Flashcard.front_content.ilike(pattern, escape="\\"),  # type: ignore[union-attr]
                Flashcard.back_content.ilike(pattern, escape="\\"),  # type: ignore[union-attr]
                Flashcard.cloze_content.ilike(pattern, escape="\\"),  # type: ignore[union-attr]
            )
        )
    if tag:
        # Narrow in SQL, then match whole tags in Python
        query = query.where(Flashcard.tags.contains(tag.strip().lower(), autoescape=True))  # type: ignore[attr-defined]

    query = query.order_by(Flashcard.created_at, Flashcard.id)  # type: ignore
    flashcards = list(session.exec(query).all())

    if tag:
        wanted = tag.strip().lower()
        flashcards = [card for card in flashcards if wanted in card.tag_list]
    return flashcards


def update_flashcard(
    session: Session,
    user_id: int,
    flashcard_id: int,
    request: UpdateFlashcardRequest
) -> Flashcard:
    """Update a flashcard's content and tags."""
    flashcard = get_user_flashcard(session, user_id, flashcard_id)

    if request.front_content is not None:
        flashcard.front_content = request.front_content
    if request.back_content is not None:
        flashcard.back_content = request.back_content
    if request.cloze_content is not None:
        flashcard.cloze_content = request.cloze_content
    if request.tags is not None:
        flashcard.tags = join_tags(request.tags)
    flashcard.updated_at = utc_now()

    session.add(flashcard)
    session.commit()
    session.refresh(flashcard)
    return flashcard


def delete_flashcards(session: Session, user_id: int, flashcard_ids: List[int]) -> int:
    """
    Delete the user's flashcards among flashcard_ids, along with their review logs.

    IDs that do not exist or belong to another user are ignored.

    Returns:
        Number of flashcards deleted
    """
    flashcards = session.exec(
        select(Flashcard).where(
            Flashcard.id.in_(flashcard_ids),  # type: ignore
            Flashcard.user_id == user_id
        )
    ).all()
    if not flashcards:
        return 0

    owned_ids = [card.id for card in flashcards]
    reviews = session.exec(
        select(FlashcardReview).where(FlashcardReview.flashcard_id.in_(owned_ids))  # type: ignore
    ).all()
    for review in reviews:
        session.delete(review)
    for card in flashcards:
        session.delete(card)
    session.commit()

    logger.info(f"Deleted {len(flashcards)} flashcard(s) and {len(reviews)} review(s) for user {user_id}")
    return len(flashcards)


def set_suspended(session: Session, user_id: int, flashcard_ids: List[int], suspended: bool) -> int:
    """
    Suspend or unsuspend the user's flashcards among flashcard_ids.

    Suspending sets the status to suspended. Unsuspending returns the card to new
    and only touches cards that are currently suspended. Scheduling fields are left
    as they are.

    Returns:
        Number of flashcards changed
    """
    query = select(Flashcard).where(
        Flashcard.id.in_(flashcard_ids),  # type: ignore
        Flashcard.user_id == user_id
    )
    if suspended:
        query = query.where(Flashcard.status != FlashcardStatus.SUSPENDED.value)
        new_status = FlashcardStatus.SUSPENDED.value
    else:
        query = query.where(Flashcard.status == FlashcardStatus.SUSPENDED.value)
        new_status = FlashcardStatus.NEW.value

    flashcards = session.exec(query).all()
    now = utc_now()
    for card in flashcards:
        card.status = new_status
        card.updated_at = now
        session.add(card)
    session.commit()

    logger.info(
        f"{'Suspended' if suspended else 'Unsuspended'} {len(flashcards)} flashcard(s) for user {user_id}"
    )
    return len(flashcards)


def get_due_cards(
    session: Session,
    user_id: int,
    deck_id: Optional[int] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Flashcard]:
    """
    Cards due for review: next review has passed and the card is not suspended.

    Returns:
        Flashcards ordered by next review time, most overdue first
    """
    now = to_utc(now) if now is not None else utc_now()
    query = select(Flashcard).where(
        Flashcard.user_id == user_id,
        Flashcard.next_review <= now,
        Flashcard.status != FlashcardStatus.SUSPENDED.value
    )
    if deck_id is not None:
        query = query.where(Flashcard.deck_id == deck_id)
    query = query.order_by(Flashcard.next_review, Flashcard.id)  # type: ignore
    if limit is not None:
        query = query.limit(limit)
    return list(session.exec(query).all())


def get_new_cards(
    session: Session,
    user_id: int,
    deck_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Flashcard]:
    """Cards that have never been reviewed, oldest first."""
    query = select(Flashcard).where(
        Flashcard.user_id == user_id,
        Flashcard.status == FlashcardStatus.NEW.value
    )
    if deck_id is not None:
        query = query.where(Flashcard.deck_id == deck_id)
    query = query.order_by(Flashcard.created_at, Flashcard.id)  # type: ignore
    if limit is not None:
        query = query.limit(limit)
    return list(session.exec(query).all())


def get_study_cards(
    session: Session,
    user_id: int,
    deck_id: Optional[int] = None,
    max_due: int = 30,
    max_new: int = 10,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Flashcard]:
    """
    Build a study queue of due cards plus new cards, shuffled.

    New cards are usually due as well; a card appears at most once.

    Args:
        session: Database session
        user_id: Owner of the cards
        deck_id: Only cards in this deck
        max_due: Maximum number of due cards
        max_new: Maximum number of new cards
        now: Reference time (defaults to now, UTC)
        rng: Random generator used for shuffling

    Returns:
        Shuffled list of flashcards
    """
    due_cards = get_due_cards(session, user_id, deck_id=deck_id, limit=max_due, now=now)
    new_cards = get_new_cards(session, user_id, deck_id=deck_id, limit=max_new)

    seen = {card.id for card in due_cards}
    study_cards = due_cards + [card for card in new_cards if card.id not in seen]
    (rng or random).shuffle(study_cards)
    return study_cards


def get_review_history(session: Session, user_id: int, flashcard_id: int) -> List[FlashcardReview]:
    """Review log of a flashcard, newest first."""
    get_user_flashcard(session, user_id, flashcard_id)
    return list(session.exec(
        select(FlashcardReview)
        .where(
            FlashcardReview.flashcard_id == flashcard_id,
            FlashcardReview.user_id == user_id
        )
        .order_by(FlashcardReview.reviewed_at.desc(), FlashcardReview.id.desc())  # type: ignore
    ).all())
