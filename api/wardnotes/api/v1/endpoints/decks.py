"""
Deck endpoints.
"""
# pyright: reportAttributeAccessIssue=false
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from wardnotes.core.database import get_session
from wardnotes.core.security import get_current_user
from wardnotes.models.deck import FlashcardDeck
from wardnotes.models.user import User
from wardnotes.schemas.deck import (
    DeckResponse,
    CreateDeckRequest,
    UpdateDeckRequest,
    DecksResponse,
    DeckStatsResponse
)
from wardnotes.services.deck_service import (
    calculate_deck_stats,
    delete_deck,
    get_user_deck,
    list_decks
)
from wardnotes.utils.time_utils import utc_now

router = APIRouter(prefix="/decks", tags=["decks"])


@router.get("", response_model=DecksResponse)
async def get_decks(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Get the user's decks, most recently created first."""
    decks = list_decks(session, current_user.id)
    return DecksResponse(decks=[DeckResponse.model_validate(deck) for deck in decks])


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    request: CreateDeckRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Create a new deck."""
    now = utc_now()
    deck = FlashcardDeck(
        user_id=current_user.id,
        name=request.name.strip(),
        description=request.description,
        color=request.color,
        created_at=now,
        updated_at=now,
    )
    session.add(deck)
    session.commit()
    session.refresh(deck)
    return DeckResponse.model_validate(deck)


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(
    deck_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Get a single deck."""
    return DeckResponse.model_validate(get_user_deck(session, current_user.id, deck_id))


@router.patch("/{deck_id}", response_model=DeckResponse)
async def update_deck(
    deck_id: int,
    request: UpdateDeckRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Update a deck's name, description or color."""
    deck = get_user_deck(session, current_user.id, deck_id)

    if request.name is not None:
        deck.name = request.name.strip()
    if request.description is not None:
        deck.description = request.description
    if request.color is not None:
        deck.color = request.color
    deck.updated_at = utc_now()

    session.add(deck)
    session.commit()
    session.refresh(deck)
    return DeckResponse.model_validate(deck)


@router.delete("/{deck_id}", status_code=status.HTTP_200_OK)
async def remove_deck(
    deck_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Delete a deck with all of its flashcards and their review history."""
    counts = delete_deck(session, current_user.id, deck_id)
    return {
        "message": f"Deck {deck_id} deleted",
        **counts
    }


@router.get("/{deck_id}/stats", response_model=DeckStatsResponse)
async def get_deck_stats(
    deck_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Card counts by status for a deck, including how many are due now."""
    stats = calculate_deck_stats(session, current_user.id, deck_id)
    return DeckStatsResponse(deck_id=deck_id, stats=stats)
