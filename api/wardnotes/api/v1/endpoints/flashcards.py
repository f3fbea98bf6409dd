"""
Flashcard endpoints: CRUD, review queues, suspension and review submission.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from typing import Optional
import logging

from wardnotes.core.config import settings
from wardnotes.core.database import get_session
from wardnotes.core.security import get_current_user
from wardnotes.models.enums import FlashcardStatus, FlashcardType
from wardnotes.models.user import User
from wardnotes.schemas.flashcard import (
    BulkCreateFlashcardsRequest,
    BulkOperationResponse,
    CreateFlashcardRequest,
    FlashcardEnvelope,
    FlashcardIdsRequest,
    FlashcardResponse,
    FlashcardsResponse,
    UpdateFlashcardRequest
)
from wardnotes.schemas.review import (
    FlashcardReviewResponse,
    ReviewHistoryResponse,
    SubmitReviewRequest
)
from wardnotes.services import flashcard_service
from wardnotes.services.review_repository import SQLModelReviewRepository
from wardnotes.services.review_service import submit_review

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


def _to_list_response(flashcards) -> FlashcardsResponse:
    return FlashcardsResponse(
        flashcards=[FlashcardResponse.model_validate(card) for card in flashcards]
    )


@router.get("", response_model=FlashcardsResponse)
async def get_flashcards(
    deck_id: Optional[int] = None,
    card_status: Optional[FlashcardStatus] = Query(None, alias="status"),
    card_type: Optional[FlashcardType] = None,
    tag: Optional[str] = None,
    due_only: bool = False,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """List the user's flashcards with optional filters."""
    flashcards = flashcard_service.list_flashcards(
        session,
        current_user.id,
        deck_id=deck_id,
        status=card_status,
        card_type=card_type,
        tag=tag,
        due_only=due_only,
        search=search,
    )
    return _to_list_response(flashcards)


@router.post("", response_model=FlashcardEnvelope, status_code=status.HTTP_201_CREATED)
async def create_flashcard(
    request: CreateFlashcardRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Create a flashcard. New cards start with default scheduling and are due immediately."""
    flashcards = flashcard_service.create_flashcards(session, current_user.id, [request])
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(flashcards[0]))


@router.post("/bulk", response_model=FlashcardsResponse, status_code=status.HTTP_201_CREATED)
async def bulk_create_flashcards(
    request: BulkCreateFlashcardsRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Create several flashcards in one transaction."""
    flashcards = flashcard_service.create_flashcards(session, current_user.id, request.cards)
    return _to_list_response(flashcards)


@router.post("/bulk-delete", response_model=BulkOperationResponse)
async def bulk_delete_flashcards(
    request: FlashcardIdsRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Delete several flashcards and their review history."""
    deleted = flashcard_service.delete_flashcards(session, current_user.id, request.ids)
    return BulkOperationResponse(message=f"Deleted {deleted} flashcard(s)", affected_count=deleted)


@router.post("/suspend", response_model=BulkOperationResponse)
async def suspend_flashcards(
    request: FlashcardIdsRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Suspend flashcards so they are left out of review queues."""
    changed = flashcard_service.set_suspended(session, current_user.id, request.ids, suspended=True)
    return BulkOperationResponse(message=f"Suspended {changed} flashcard(s)", affected_count=changed)


@router.post("/unsuspend", response_model=BulkOperationResponse)
async def unsuspend_flashcards(
    request: FlashcardIdsRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Return suspended flashcards to the new state."""
    changed = flashcard_service.set_suspended(session, current_user.id, request.ids, suspended=False)
    return BulkOperationResponse(message=f"Unsuspended {changed} flashcard(s)", affected_count=changed)


@router.get("/due", response_model=FlashcardsResponse)
async def get_due_flashcards(
    deck_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Cards due for review (suspended cards excluded), most overdue first."""
    flashcards = flashcard_service.get_due_cards(
        session,
        current_user.id,
        deck_id=deck_id,
        limit=limit or settings.due_cards_default_limit,
    )
    return _to_list_response(flashcards)


@router.get("/new", response_model=FlashcardsResponse)
async def get_new_flashcards(
    deck_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Cards that have never been reviewed, oldest first."""
    flashcards = flashcard_service.get_new_cards(
        session,
        current_user.id,
        deck_id=deck_id,
        limit=limit or settings.new_cards_default_limit,
    )
    return _to_list_response(flashcards)


@router.get("/study", response_model=FlashcardsResponse)
async def get_study_flashcards(
    deck_id: Optional[int] = None,
    max_due: int = Query(30, ge=0, le=500),
    max_new: int = Query(10, ge=0, le=500),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """A shuffled study queue of due cards and new cards."""
    flashcards = flashcard_service.get_study_cards(
        session,
        current_user.id,
        deck_id=deck_id,
        max_due=max_due,
        max_new=max_new,
    )
    return _to_list_response(flashcards)


@router.post("/review", response_model=FlashcardEnvelope)
async def review_flashcard(
    request: SubmitReviewRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """
    Submit a review of a flashcard.

    Records the review in the review log and reschedules the card with SM-2.
    Returns the updated flashcard. Nothing is written if the card is missing,
    owned by someone else or suspended.
    """
    repository = SQLModelReviewRepository(session, current_user.id)
    flashcard = submit_review(
        repository,
        request.flashcard_id,
        request.quality,
        response_time=request.response_time,
    )
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(flashcard))


@router.get("/{flashcard_id}", response_model=FlashcardEnvelope)
async def get_flashcard(
    flashcard_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Get a single flashcard."""
    flashcard = flashcard_service.get_user_flashcard(session, current_user.id, flashcard_id)
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(flashcard))


@router.patch("/{flashcard_id}", response_model=FlashcardEnvelope)
async def update_flashcard(
    flashcard_id: int,
    request: UpdateFlashcardRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Update a flashcard's content and tags."""
    flashcard = flashcard_service.update_flashcard(session, current_user.id, flashcard_id, request)
    return FlashcardEnvelope(flashcard=FlashcardResponse.model_validate(flashcard))


@router.delete("/{flashcard_id}", response_model=BulkOperationResponse)
async def delete_flashcard(
    flashcard_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Delete a flashcard and its review history."""
    flashcard_service.get_user_flashcard(session, current_user.id, flashcard_id)
    deleted = flashcard_service.delete_flashcards(session, current_user.id, [flashcard_id])
    return BulkOperationResponse(message=f"Flashcard {flashcard_id} deleted", affected_count=deleted)


@router.get("/{flashcard_id}/reviews", response_model=ReviewHistoryResponse)
async def get_flashcard_reviews(
    flashcard_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Review history of a flashcard, newest first."""
    reviews = flashcard_service.get_review_history(session, current_user.id, flashcard_id)
    return ReviewHistoryResponse(
        reviews=[FlashcardReviewResponse.model_validate(review) for review in reviews]
    )
