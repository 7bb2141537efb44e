"""
User Service - admin management of portal accounts.

Accounts themselves are created by the external auth provider; this
service only manages what the portal owns about them:
- roles in user_roles (admin, mentor, junior), unique per (user_id, role)
- the profiles.is_active flag (deactivated accounts are refused at sign-in)
"""

import logging
from typing import List, Optional

from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql

logger = logging.getLogger(__name__)


class UserService:
    """
    Handles profiles and user_roles rows.
    """

    def list_users(self) -> List[dict]:
        """All profiles with their roles, newest first."""
        return execute_raw_sql("""
            SELECT p.id::text AS user_id, p.email, p.full_name, p.is_active, p.created_at,
                   COALESCE(array_agg(ur.role::text) FILTER (WHERE ur.role IS NOT NULL), '{}') AS roles
            FROM profiles p
            LEFT JOIN user_roles ur ON ur.user_id = p.id
            GROUP BY p.id
            ORDER BY p.created_at DESC
        """)

    def assign_role(self, user_id: str, role: str) -> Optional[bool]:
        """
        Give a user a role.

        Returns:
            True if assigned, False if the user already had it,
            None if there is no such profile
        """
        with get_db_session() as db:
            exists = db.execute(
                text("SELECT 1 FROM profiles WHERE id = :id"), {"id": user_id}
            ).fetchone()
            if not exists:
                return None

            result = db.execute(
                text("""
                    INSERT INTO user_roles (user_id, role)
                    VALUES (:user_id, CAST(:role AS app_role))
                    ON CONFLICT (user_id, role) DO NOTHING
                    RETURNING id
                """),
                {"user_id": user_id, "role": role}
            )
            assigned = result.fetchone() is not None

        if assigned:
            logger.info("Role %s assigned to %s", role, user_id)
        return assigned

    def remove_role(self, user_id: str, role: str) -> bool:
        with get_db_session() as db:
            result = db.execute(
                text("DELETE FROM user_roles WHERE user_id = :user_id AND role = CAST(:role AS app_role)"),
                {"user_id": user_id, "role": role}
            )
            return result.rowcount > 0

    def set_active(self, user_id: str, is_active: bool) -> bool:
        """Activate or deactivate an account. False if there is no such profile."""
        with get_db_session() as db:
            result = db.execute(
                text("""
                    UPDATE profiles SET is_active = :is_active, updated_at = CURRENT_TIMESTAMP
                    WHERE id = :id
                """),
                {"id": user_id, "is_active": is_active}
            )
            updated = result.rowcount > 0

        if updated:
            logger.info("Account %s %s", user_id, "activated" if is_active else "deactivated")
        return updated


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_user_service() -> UserService:
    """Get user service instance."""
    return UserService()
