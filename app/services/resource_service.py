"""
Resource Service - PostgreSQL reads/writes for resources and bookmarks.

Tables used:
1. resources  - study material rows; company_id NULL means General Resources
2. bookmarks  - one row per (user_id, resource_id), unique

All methods return plain dict rows (see execute_raw_sql), so the folder
tree and analytics code never touch the database layer.
"""

import logging
from typing import List, Optional

from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql

logger = logging.getLogger(__name__)

RESOURCE_COLUMNS = """
    r.id::text AS id, r.company_id::text AS company_id, r.title, r.description,
    r.resource_type, r.round_type, r.category, r.folder_path, r.file_path,
    r.external_link, r.download_count, r.uploaded_by::text AS uploaded_by,
    r.created_at, r.updated_at
"""


class ResourceService:
    """
    Handles resource and bookmark rows.
    """

    # ------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------

    def get_general_resources(self) -> List[dict]:
        """All company-less resources, ordered by folder_path."""
        return execute_raw_sql(f"""
            SELECT {RESOURCE_COLUMNS}
            FROM resources r
            WHERE r.company_id IS NULL
            ORDER BY r.folder_path ASC NULLS FIRST, r.created_at ASC
        """)

    def get_company_resources(self, company_id: str) -> List[dict]:
        """Resources attached to one company, newest first."""
        return execute_raw_sql(f"""
            SELECT {RESOURCE_COLUMNS}
            FROM resources r
            WHERE r.company_id = :company_id
            ORDER BY r.created_at DESC
        """, {"company_id": company_id})

    def get_resources(self, uploaded_by: Optional[str] = None) -> List[dict]:
        """All resources (optionally one uploader's), newest first."""
        sql = f"SELECT {RESOURCE_COLUMNS} FROM resources r"
        params = {}

        if uploaded_by:
            sql += " WHERE r.uploaded_by = :uploaded_by"
            params["uploaded_by"] = uploaded_by

        sql += " ORDER BY r.created_at DESC"
        return execute_raw_sql(sql, params)

    def get_resource(self, resource_id: str) -> Optional[dict]:
        results = execute_raw_sql(
            f"SELECT {RESOURCE_COLUMNS} FROM resources r WHERE r.id = :id",
            {"id": resource_id}
        )
        return results[0] if results else None

    def company_exists(self, company_id: str) -> bool:
        return bool(execute_raw_sql("SELECT 1 AS found FROM companies WHERE id = :id", {"id": company_id}))

    def create_resource(self, data: dict, uploaded_by: str) -> Optional[dict]:
        """
        Insert a resource row and return it as read back.

        `data` holds ResourceCreate fields; enum members are stored by value.
        """
        params = {
            field: getattr(value, "value", value) for field, value in data.items()
        }
        params["company_id"] = str(params["company_id"]) if params.get("company_id") else None
        params["uploaded_by"] = uploaded_by

        results = execute_raw_sql("""
            INSERT INTO resources (company_id, title, description, resource_type, round_type,
                category, folder_path, file_path, external_link, uploaded_by)
            VALUES (:company_id, :title, :description, CAST(:resource_type AS resource_type),
                CAST(:round_type AS round_type), CAST(:category AS resource_category),
                :folder_path, :file_path, :external_link, :uploaded_by)
            RETURNING id::text AS id
        """, params)

        resource_id = results[0]["id"]
        logger.info("Resource %s created by %s", resource_id, uploaded_by)
        return self.get_resource(resource_id)

    def delete_resource(self, resource_id: str) -> bool:
        """Delete a resource; its bookmarks go with it (ON DELETE CASCADE)."""
        with get_db_session() as db:
            result = db.execute(text("DELETE FROM resources WHERE id = :id"), {"id": resource_id})
            return result.rowcount > 0

    def increment_download_count(self, resource_id: str) -> Optional[int]:
        """
        Bump the denormalized download counter in one statement.

        Returns the new count, or None if the resource does not exist.
        """
        with get_db_session() as db:
            result = db.execute(
                text("""
                    UPDATE resources
                    SET download_count = COALESCE(download_count, 0) + 1,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id
                    RETURNING download_count
                """),
                {"id": resource_id}
            )
            row = result.fetchone()
        return row[0] if row else None

    # ------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------

    def add_bookmark(self, user_id: str, resource_id: str) -> bool:
        """
        Bookmark a resource for a user.

        Returns False when the bookmark already exists.
        """
        with get_db_session() as db:
            result = db.execute(
                text("""
                    INSERT INTO bookmarks (user_id, resource_id)
                    VALUES (:user_id, :resource_id)
                    ON CONFLICT (user_id, resource_id) DO NOTHING
                    RETURNING id
                """),
                {"user_id": user_id, "resource_id": resource_id}
            )
            created = result.fetchone() is not None

        if not created:
            logger.info("Resource %s already bookmarked by %s", resource_id, user_id)
        return created

    def remove_bookmark(self, user_id: str, resource_id: str) -> bool:
        with get_db_session() as db:
            result = db.execute(
                text("DELETE FROM bookmarks WHERE user_id = :user_id AND resource_id = :resource_id"),
                {"user_id": user_id, "resource_id": resource_id}
            )
            return result.rowcount > 0

    def get_user_bookmarks(self, user_id: str) -> List[dict]:
        """A user's bookmarked resources, most recently bookmarked first."""
        return execute_raw_sql(f"""
            SELECT b.id::text AS bookmark_id, b.created_at AS bookmarked_at,
                   c.name AS company_name, {RESOURCE_COLUMNS}
            FROM bookmarks b
            JOIN resources r ON b.resource_id = r.id
            LEFT JOIN companies c ON r.company_id = c.id
            WHERE b.user_id = :user_id
            ORDER BY b.created_at DESC
        """, {"user_id": user_id})

    def get_bookmarked_ids(self, user_id: str) -> List[str]:
        results = execute_raw_sql(
            "SELECT resource_id::text AS resource_id FROM bookmarks WHERE user_id = :user_id",
            {"user_id": user_id}
        )
        return [r["resource_id"] for r in results]

    def get_all_bookmarks(self, resource_ids: Optional[List[str]] = None) -> List[dict]:
        """Bookmark ids, optionally only for some resources. Used for counting."""
        if resource_ids is None:
            return execute_raw_sql("SELECT id::text AS id FROM bookmarks")
        if not resource_ids:
            return []
        return execute_raw_sql(
            "SELECT id::text AS id FROM bookmarks WHERE resource_id::text = ANY(:ids)",
            {"ids": list(resource_ids)}
        )


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_resource_service() -> ResourceService:
    """Get resource service instance."""
    return ResourceService()
