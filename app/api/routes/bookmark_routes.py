"""
Bookmark Routes

GET /bookmarks - List the current user's bookmarked resources
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.resource_service import get_resource_service
from app.schemas.schemas import (
    BookmarkListResponse, BookmarkedResourceResponse, ResourceResponse
)

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


@router.get("", response_model=BookmarkListResponse)
async def list_bookmarks(user: dict = Depends(get_current_user)):
    """Get bookmarked resources, most recently bookmarked first."""
    rows = get_resource_service().get_user_bookmarks(user["user_id"])

    bookmarks = [
        BookmarkedResourceResponse(
            bookmark_id=r["bookmark_id"],
            bookmarked_at=r["bookmarked_at"],
            company_name=r["company_name"],
            resource=ResourceResponse.from_row(r)
        ) for r in rows
    ]

    return BookmarkListResponse(bookmarks=bookmarks, total=len(bookmarks))
