"""
Study analytics endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from wardnotes.core.database import get_session
from wardnotes.core.security import get_current_user
from wardnotes.models.user import User
from wardnotes.schemas.analytics import StudyAnalyticsResponse
from wardnotes.services.analytics_service import get_study_analytics

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/study", response_model=StudyAnalyticsResponse)
async def study_analytics(
    days: int = Query(30, ge=1, le=365, description="Size of the trailing window in days"),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Review totals, accuracy, streak and per-day stats."""
    return get_study_analytics(session, current_user.id, days=days)
