"""
Admin Routes (admin only)

GET /admin/users - All accounts with their roles
POST /admin/users/{user_id}/roles - Assign a role
DELETE /admin/users/{user_id}/roles/{role} - Remove a role
PATCH /admin/users/{user_id}/status - Activate or deactivate an account
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List
from uuid import UUID

from app.core.auth import get_current_admin
from app.services.user_service import get_user_service
from app.schemas.schemas import (
    AppRole, RoleAssignment, AccountStatusUpdate, UserResponse, MessageResponse
)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=List[UserResponse])
async def list_users(admin: dict = Depends(get_current_admin)):
    """List accounts, newest first."""
    return [
        UserResponse(
            user_id=r["user_id"], email=r["email"], full_name=r["full_name"],
            is_active=bool(r["is_active"]), roles=list(r["roles"] or []), created_at=r["created_at"]
        ) for r in get_user_service().list_users()
    ]


@router.post("/users/{user_id}/roles", response_model=MessageResponse)
async def assign_role(user_id: UUID, assignment: RoleAssignment, admin: dict = Depends(get_current_admin)):
    """Assign a role. Assigning a role the user already holds is a no-op."""
    assigned = get_user_service().assign_role(str(user_id), assignment.role.value)
    if assigned is None:
        raise HTTPException(status_code=404, detail="User not found")

    if not assigned:
        return MessageResponse(message=f"User already has role {assignment.role.value}")
    return MessageResponse(message=f"Role {assignment.role.value} assigned")


@router.delete("/users/{user_id}/roles/{role}", response_model=MessageResponse)
async def remove_role(user_id: UUID, role: AppRole, admin: dict = Depends(get_current_admin)):
    """Remove a role from a user."""
    if not get_user_service().remove_role(str(user_id), role.value):
        raise HTTPException(status_code=404, detail=f"User does not have role {role.value}")
    return MessageResponse(message=f"Role {role.value} removed")


@router.patch("/users/{user_id}/status", response_model=MessageResponse)
async def set_account_status(user_id: UUID, update: AccountStatusUpdate, admin: dict = Depends(get_current_admin)):
    """Activate or deactivate an account."""
    if not get_user_service().set_active(str(user_id), update.is_active):
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="Account activated" if update.is_active else "Account deactivated")
