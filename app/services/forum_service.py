"""
Forum Service - student questions and replies.

Tables used:
1. forum_posts    - one question per row (title, content, author_id)
2. forum_replies  - answers, each tied to a post (ON DELETE CASCADE)

Posts are listed newest first with their replies oldest first, each
carrying the author's name and roles so clients can label mentor answers.
"""

import logging
from collections import defaultdict
from typing import List, Optional

from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql

logger = logging.getLogger(__name__)

# Author name and roles for a row aliased "x" with an author_id column
AUTHOR_COLUMNS = """
    x.author_id::text AS author_id, p.full_name AS author_name,
    COALESCE(array_agg(ur.role::text) FILTER (WHERE ur.role IS NOT NULL), '{}') AS author_roles
"""
AUTHOR_JOINS = """
    LEFT JOIN profiles p ON p.id = x.author_id
    LEFT JOIN user_roles ur ON ur.user_id = x.author_id
"""


class ForumService:
    """
    Handles forum posts and replies.
    """

    def list_posts(self) -> List[dict]:
        """All posts, newest first, each with a `replies` list (oldest first)."""
        posts = execute_raw_sql(f"""
            SELECT x.id::text AS id, x.title, x.content, x.created_at, {AUTHOR_COLUMNS}
            FROM forum_posts x
            {AUTHOR_JOINS}
            GROUP BY x.id, p.full_name
            ORDER BY x.created_at DESC
        """)
        if not posts:
            return []

        replies = execute_raw_sql(f"""
            SELECT x.id::text AS id, x.post_id::text AS post_id, x.content, x.created_at,
                   {AUTHOR_COLUMNS}
            FROM forum_replies x
            {AUTHOR_JOINS}
            WHERE x.post_id::text = ANY(:ids)
            GROUP BY x.id, p.full_name
            ORDER BY x.created_at ASC
        """, {"ids": [post["id"] for post in posts]})

        replies_by_post = defaultdict(list)
        for reply in replies:
            replies_by_post[reply["post_id"]].append(reply)

        for post in posts:
            post["replies"] = replies_by_post.get(post["id"], [])
        return posts

    def create_post(self, author_id: str, title: str, content: str) -> dict:
        results = execute_raw_sql("""
            INSERT INTO forum_posts (author_id, title, content)
            VALUES (:author_id, :title, :content)
            RETURNING id::text AS id, title, content, author_id::text AS author_id, created_at
        """, {"author_id": author_id, "title": title, "content": content})

        logger.info("Forum post %s created by %s", results[0]["id"], author_id)
        return results[0]

    def add_reply(self, post_id: str, author_id: str, content: str) -> Optional[dict]:
        """
        Reply to a post.

        Returns None if the post does not exist (nothing is inserted).
        """
        results = execute_raw_sql("""
            INSERT INTO forum_replies (post_id, author_id, content)
            SELECT fp.id, :author_id, :content FROM forum_posts fp WHERE fp.id = :post_id
            RETURNING id::text AS id, post_id::text AS post_id, content,
                      author_id::text AS author_id, created_at
        """, {"post_id": post_id, "author_id": author_id, "content": content})
        return results[0] if results else None

    def delete_post(self, post_id: str) -> bool:
        """Delete a post and, through the foreign key, its replies."""
        with get_db_session() as db:
            result = db.execute(text("DELETE FROM forum_posts WHERE id = :id"), {"id": post_id})
            return result.rowcount > 0

    def delete_reply(self, reply_id: str) -> bool:
        with get_db_session() as db:
            result = db.execute(text("DELETE FROM forum_replies WHERE id = :id"), {"id": reply_id})
            return result.rowcount > 0


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_forum_service() -> ForumService:
    """Get forum service instance."""
    return ForumService()
