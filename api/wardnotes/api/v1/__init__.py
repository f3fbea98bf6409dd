"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from wardnotes.api.v1.endpoints import auth, decks, flashcards, analytics

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(auth.router)
api_router.include_router(decks.router)
api_router.include_router(flashcards.router)
api_router.include_router(analytics.router)
