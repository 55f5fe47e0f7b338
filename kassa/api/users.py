"""
kassa/api/users.py

Purpose: Account settings and contact list

- Other users, for starting a chat
- Username, password and profile photo of the caller
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from kassa.api.deps import get_current_user, get_user_service
from kassa.core.config import settings
from kassa.core.exceptions import ValidationError
from kassa.schemas.response import MessageResponse
from kassa.schemas.user import ChangePasswordRequest, UpdateUsernameRequest, UserProfile
from kassa.services.user_service import UserService, to_profile
from kassa.utils import constants

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserProfile])
async def list_chat_users(
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> List[UserProfile]:
    """Every registered user except the caller."""
    return [to_profile(other) for other in await users.list_users(exclude_user_id=user["_id"])]


@router.get("/me", response_model=UserProfile)
async def get_my_profile(user: Dict[str, Any] = Depends(get_current_user)) -> UserProfile:
    return to_profile(user)


@router.patch("/me/username", response_model=UserProfile)
async def update_username(
    request: UpdateUsernameRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserProfile:
    updated = await users.update_username(user["_id"], request.username)
    return to_profile(updated)


@router.post("/me/password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    await users.change_password(user["_id"], request.current_password, request.new_password)
    return MessageResponse(message=constants.MSG_PASSWORD_UPDATED)


@router.put("/me/photo", response_model=UserProfile)
async def upload_photo(
    photo: UploadFile = File(..., description="JPEG, PNG, GIF or WebP image"),
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> UserProfile:
    # One byte past the limit is enough to detect an oversize upload
    data = await photo.read(settings.MAX_AVATAR_BYTES + 1)
    if len(data) > settings.MAX_AVATAR_BYTES:
        raise ValidationError(constants.MSG_PHOTO_TOO_LARGE, details={"max_bytes": settings.MAX_AVATAR_BYTES})

    updated = await users.save_photo(user["_id"], photo.filename, photo.content_type, data)
    return to_profile(updated)


@router.get("/{user_id}/photo")
async def get_photo(
    user_id: str,
    _: Dict[str, Any] = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Response:
    data, content_type = await users.load_photo(user_id)
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "private, max-age=300"})
