"""
Announcement Routes

GET /announcements - Latest announcements, pinned first
POST /announcements - Post an announcement (mentor/admin)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List

from app.db.postgres import execute_raw_sql
from app.core.auth import get_content_manager
from app.schemas.schemas import AnnouncementCreate, AnnouncementResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["Announcements"])


def _announcement_from_row(r: dict) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=r["id"], title=r["title"], content=r["content"],
        is_pinned=bool(r["is_pinned"]), posted_by=r["posted_by"],
        posted_by_name=r.get("posted_by_name"), created_at=r["created_at"]
    )


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(limit: int = Query(5, ge=1, le=50)):
    """Pinned announcements first, then newest first."""
    results = execute_raw_sql("""
        SELECT a.id::text AS id, a.title, a.content, a.is_pinned,
               a.posted_by::text AS posted_by, p.full_name AS posted_by_name, a.created_at
        FROM announcements a
        LEFT JOIN profiles p ON p.id = a.posted_by
        ORDER BY a.is_pinned DESC NULLS LAST, a.created_at DESC
        LIMIT :limit
    """, {"limit": limit})

    return [_announcement_from_row(r) for r in results]


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def post_announcement(announcement: AnnouncementCreate, user: dict = Depends(get_content_manager)):
    """Post an announcement. Mentors and admins only."""
    title, content = announcement.title.strip(), announcement.content.strip()
    if not title or not content:
        raise HTTPException(status_code=422, detail="Title and content are required")

    results = execute_raw_sql("""
        INSERT INTO announcements (title, content, is_pinned, posted_by)
        VALUES (:title, :content, :is_pinned, :posted_by)
        RETURNING id::text AS id, title, content, is_pinned, posted_by::text AS posted_by, created_at
    """, {
        "title": title, "content": content,
        "is_pinned": announcement.is_pinned, "posted_by": user["user_id"]
    })

    logger.info("Announcement %s posted by %s", results[0]["id"], user["user_id"])
    return _announcement_from_row(results[0])
