"""
Authentication Utility - verify externally issued JWTs.

Sign-up, sign-in and token issuance belong to the external auth provider.
This module only:
- Verifies the bearer token signature, expiry and audience
- Checks the profile exists and is active
- Exposes FastAPI dependencies for routes that need a user
- Gates content management on the roles held in user_roles
"""

import logging
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings
from app.db.postgres import execute_raw_sql

logger = logging.getLogger(__name__)

# Bearer token extractors
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience
        )
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        return None


def load_user(user_id: str) -> Optional[dict]:
    """Fetch profile and roles for a user id, or None if no profile exists."""
    results = execute_raw_sql("""
        SELECT p.id::text AS user_id, p.email, p.full_name, p.is_active,
               COALESCE(array_agg(ur.role::text) FILTER (WHERE ur.role IS NOT NULL), '{}') AS roles
        FROM profiles p
        LEFT JOIN user_roles ur ON ur.user_id = p.id
        WHERE p.id = :id
        GROUP BY p.id, p.email, p.full_name, p.is_active
    """, {"id": user_id})
    return results[0] if results else None


def _user_from_token(token: str) -> dict:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if not payload:
        raise credentials_exception

    try:
        user_id = str(UUID(str(payload.get("sub"))))
    except ValueError:
        # Profile ids are UUIDs; anything else cannot name a profile
        raise credentials_exception

    user = load_user(user_id)
    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return {
        "user_id": user["user_id"],
        "email": user["email"],
        "roles": list(user["roles"] or [])
    }


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    return _user_from_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer_scheme)
) -> Optional[dict]:
    """Dependency - Like get_current_user, but anonymous visitors get None."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


def require_roles(*roles: str):
    """
    Dependency factory - Require the user to hold at least one of `roles`.

    Usage:
        @router.post("/x")
        async def route(user: dict = Depends(require_roles("mentor", "admin"))):
            ...
    """
    allowed = set(roles)

    async def dependency(user: dict = Depends(get_current_user)) -> dict:
        if not allowed.intersection(user["roles"]):
            raise HTTPException(status_code=403, detail=f"Requires role: {' or '.join(sorted(allowed))}")
        return user

    return dependency


# Mentors and admins manage companies, resources, announcements and forum moderation
get_content_manager = require_roles("mentor", "admin")
get_current_admin = require_roles("admin")
