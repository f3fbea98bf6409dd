"""
Deck service for business logic related to flashcard decks.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlmodel import Session, select

from wardnotes.core.exceptions import NotFoundError
from wardnotes.models.deck import FlashcardDeck
from wardnotes.models.enums import FlashcardStatus
from wardnotes.models.flashcard import Flashcard
from wardnotes.models.flashcard_review import FlashcardReview
from wardnotes.schemas.deck import DeckStats
from wardnotes.utils.time_utils import to_utc, utc_now

logger = logging.getLogger(__name__)


def get_user_deck(session: Session, user_id: int, deck_id: int) -> FlashcardDeck:
    """
    Get a deck owned by the user.

    Raises:
        NotFoundError: If the deck does not exist or belongs to another user
    """
    deck = session.exec(
        select(FlashcardDeck).where(
            FlashcardDeck.id == deck_id,
            FlashcardDeck.user_id == user_id
        )
    ).first()
    if not deck:
        raise NotFoundError(f"Deck with id {deck_id} not found")
    return deck


def list_decks(session: Session, user_id: int) -> List[FlashcardDeck]:
    """List a user's decks, most recently created first."""
    return list(session.exec(
        select(FlashcardDeck)
        .where(FlashcardDeck.user_id == user_id)
        .order_by(FlashcardDeck.created_at.desc(), FlashcardDeck.id.desc())  # type: ignore
    ).all())


def delete_deck(session: Session, user_id: int, deck_id: int) -> Dict[str, int]:
    """
    Delete a deck together with its flashcards and their review logs.

    Deletes in the order required by foreign keys:
    1. FlashcardReviews (they reference flashcards)
    2. Flashcards (they reference the deck)
    3. The deck itself

    Returns:
        Dict with counts: {'flashcards_deleted': int, 'reviews_deleted': int}
    """
    deck = get_user_deck(session, user_id, deck_id)

    flashcards = session.exec(
        select(Flashcard).where(Flashcard.deck_id == deck.id)
    ).all()
    flashcard_ids = [card.id for card in flashcards]

    reviews_deleted = 0
    if flashcard_ids:
        reviews = session.exec(
            select(FlashcardReview).where(FlashcardReview.flashcard_id.in_(flashcard_ids))  # type: ignore
        ).all()
        reviews_deleted = len(reviews)
        for review in reviews:
            session.delete(review)

    for card in flashcards:
        session.delete(card)
    session.delete(deck)
    session.commit()

    logger.info(
        f"Deleted deck {deck_id} for user {user_id}: "
        f"{len(flashcards)} flashcards, {reviews_deleted} reviews"
    )
    return {
        'flashcards_deleted': len(flashcards),
        'reviews_deleted': reviews_deleted,
    }


def calculate_deck_stats(
    session: Session,
    user_id: int,
    deck_id: int,
    now: Optional[datetime] = None
) -> DeckStats:
    """
    Count a deck's cards by status.

    New cards always count as due. Learning, review and mature cards count as due
    once their next review time has passed. Suspended cards are never due.

    Args:
        session: Database session
        user_id: Owner of the deck
        deck_id: Deck to summarize
        now: Reference time (defaults to now, UTC)

    Returns:
        DeckStats
    """
    get_user_deck(session, user_id, deck_id)
    now = to_utc(now) if now is not None else utc_now()

    rows = session.exec(
        select(Flashcard.status, Flashcard.next_review).where(
            Flashcard.deck_id == deck_id,
            Flashcard.user_id == user_id
        )
    ).all()

    stats = DeckStats(total_cards=len(rows))
    for status, next_review in rows:
        is_due = next_review is not None and next_review <= now
        if status == FlashcardStatus.NEW.value:
            stats.new_cards += 1
            stats.due_cards += 1
        elif status == FlashcardStatus.LEARNING.value:
            stats.learning_cards += 1
            if is_due:
                stats.due_cards += 1
        elif status == FlashcardStatus.REVIEW.value:
            stats.review_cards += 1
            if is_due:
                stats.due_cards += 1
        elif status == FlashcardStatus.MATURE.value:
            stats.mature_cards += 1
            if is_due:
                stats.due_cards += 1
        elif status == FlashcardStatus.SUSPENDED.value:
            stats.suspended_cards += 1
        else:
            logger.warning(f"Deck {deck_id}: flashcard with unknown status '{status}'")

    return stats
