"""
Forum Routes

GET /forum/posts - All questions with their replies
POST /forum/posts - Ask a question (auth)
POST /forum/posts/{post_id}/replies - Reply to a question (auth)
DELETE /forum/posts/{post_id} - Remove a question (mentor/admin)
DELETE /forum/replies/{reply_id} - Remove a reply (mentor/admin)
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List
from uuid import UUID

from app.core.auth import get_current_user, get_content_manager
from app.services.forum_service import get_forum_service
from app.schemas.schemas import (
    ForumPostCreate, ForumReplyCreate, ForumPostResponse, ForumReplyResponse, MessageResponse
)

router = APIRouter(prefix="/forum", tags=["Forum"])


def _reply_from_row(r: dict) -> ForumReplyResponse:
    return ForumReplyResponse(
        id=r["id"], post_id=r["post_id"], content=r["content"],
        author_id=r.get("author_id"), author_name=r.get("author_name"),
        author_roles=list(r.get("author_roles") or []), created_at=r.get("created_at")
    )


def _post_from_row(r: dict) -> ForumPostResponse:
    return ForumPostResponse(
        id=r["id"], title=r["title"], content=r["content"],
        author_id=r.get("author_id"), author_name=r.get("author_name"),
        author_roles=list(r.get("author_roles") or []), created_at=r.get("created_at"),
        replies=[_reply_from_row(reply) for reply in r.get("replies", [])]
    )


@router.get("/posts", response_model=List[ForumPostResponse])
async def list_posts():
    """Questions newest first, replies oldest first."""
    return [_post_from_row(post) for post in get_forum_service().list_posts()]


@router.post("/posts", response_model=ForumPostResponse, status_code=201)
async def create_post(post: ForumPostCreate, user: dict = Depends(get_current_user)):
    """Ask a question."""
    title, content = post.title.strip(), post.content.strip()
    if not title or not content:
        raise HTTPException(status_code=422, detail="Title and content are required")

    created = get_forum_service().create_post(user["user_id"], title, content)
    return _post_from_row(created)


@router.post("/posts/{post_id}/replies", response_model=ForumReplyResponse, status_code=201)
async def reply_to_post(post_id: UUID, reply: ForumReplyCreate, user: dict = Depends(get_current_user)):
    """Reply to a question."""
    content = reply.content.strip()
    if not content:
        raise HTTPException(status_code=422, detail="Reply cannot be empty")

    created = get_forum_service().add_reply(str(post_id), user["user_id"], content)
    if not created:
        raise HTTPException(status_code=404, detail="Post not found")

    return _reply_from_row(created)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: UUID, user: dict = Depends(get_content_manager)):
    """Remove a question and its replies."""
    if not get_forum_service().delete_post(str(post_id)):
        raise HTTPException(status_code=404, detail="Post not found")
    return MessageResponse(message="Post deleted")


@router.delete("/replies/{reply_id}", response_model=MessageResponse)
async def delete_reply(reply_id: UUID, user: dict = Depends(get_content_manager)):
    """Remove a reply."""
    if not get_forum_service().delete_reply(str(reply_id)):
        raise HTTPException(status_code=404, detail="Reply not found")
    return MessageResponse(message="Reply deleted")
