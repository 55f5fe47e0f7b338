"""
kassa/api/auth.py

Purpose: Registration and login

- POST /auth/register  create an account
- POST /auth/login     exchange credentials for a bearer token
- GET  /auth/me        profile of the token holder
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from kassa.api.deps import get_current_user, get_user_service
from kassa.core.logging import get_logger
from kassa.core.security import create_access_token
from kassa.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from kassa.services.user_service import UserService, to_profile

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    users: UserService = Depends(get_user_service),
) -> UserProfile:
    """
    Creates an account. The client logs in afterwards.
    """
    user = await users.register(request)
    return to_profile(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    user = await users.authenticate(request.email, request.password)
    logger.info("User logged in", extra={"user_id": user["_id"]})
    return TokenResponse(
        access_token=create_access_token(user["_id"]),
        user=to_profile(user),
    )


@router.get("/me", response_model=UserProfile)
async def me(user: Dict[str, Any] = Depends(get_current_user)) -> UserProfile:
    return to_profile(user)
