"""
Analytics Routes

GET /analytics/summary - Download/view/bookmark totals and top resources
"""

from fastapi import APIRouter, Query
from typing import Optional
from uuid import UUID

from app.services.analytics_service import get_analytics_service
from app.schemas.schemas import AnalyticsSummaryResponse, LeaderboardEntry, ResourceResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def analytics_summary(
    top_n: Optional[int] = Query(None, ge=1, le=50, description="Leaderboard size (default from settings)"),
    uploaded_by: Optional[UUID] = Query(None, description="Only resources uploaded by this user")
):
    """
    Mentor dashboard figures.

    Per-resource download counts come from the event log when a resource
    has download events, otherwise from its download_count column. If the
    event log is unreachable, `events_available` is false and every figure
    comes from download_count.
    """
    summary = get_analytics_service().build_summary(
        top_n=top_n, uploaded_by=str(uploaded_by) if uploaded_by else None
    )

    return AnalyticsSummaryResponse(
        total_downloads=summary["total_downloads"],
        total_views=summary["total_views"],
        total_bookmarks=summary["total_bookmarks"],
        events_available=summary["events_available"],
        top=[
            LeaderboardEntry(
                resource=ResourceResponse.from_row(entry["resource"]),
                effective_count=entry["effective_count"]
            ) for entry in summary["top"]
        ]
    )
