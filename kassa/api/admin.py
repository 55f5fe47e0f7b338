"""
kassa/api/admin.py

Purpose: User management for superadmins

- List all accounts
- Toggle role between user and superadmin
- Delete an account and its data
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from kassa.api.deps import get_user_service, require_superadmin
from kassa.schemas.response import MessageResponse
from kassa.schemas.user import RoleUpdateRequest, UserProfile
from kassa.services.user_service import UserService, to_profile
from kassa.utils import constants

router = APIRouter(prefix="/admin/users", tags=["Admin"])


@router.get("", response_model=List[UserProfile])
async def list_users(
    _: Dict[str, Any] = Depends(require_superadmin),
    users: UserService = Depends(get_user_service),
) -> List[UserProfile]:
    return [to_profile(user) for user in await users.list_users()]


@router.patch("/{user_id}/role", response_model=MessageResponse)
async def change_role(
    user_id: str,
    request: RoleUpdateRequest,
    admin: Dict[str, Any] = Depends(require_superadmin),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    target = await users.change_role(admin["_id"], user_id, request.role)
    return MessageResponse(
        message=constants.MSG_ROLE_CHANGED.format(username=target.get("username"), role=request.role)
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: Dict[str, Any] = Depends(require_superadmin),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    target = await users.delete_user(admin["_id"], user_id)
    return MessageResponse(message=constants.MSG_USER_DELETED.format(username=target.get("username")))
