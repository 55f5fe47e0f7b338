"""
kassa/api/deps.py

Purpose: Shared FastAPI dependencies

- Service instances bound to the live database
- Current user from the bearer token
- Superadmin guard
- Date filter query parameters
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from kassa.core.exceptions import AuthenticationError, PermissionDeniedError, ValidationError
from kassa.core.logging import get_logger
from kassa.core.security import decode_access_token
from kassa.db.mongo import get_database, get_products_collection, get_transactions_collection
from kassa.schemas.transaction import TransactionFilter
from kassa.services.chat_service import ChatService
from kassa.services.product_service import ProductService
from kassa.services.transaction_service import TransactionService
from kassa.services.user_service import UserService
from kassa.utils import constants

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_user_service() -> UserService:
    """Get UserService instance with database connection."""
    return UserService(get_database())


async def get_product_service() -> ProductService:
    return ProductService(get_products_collection())


async def get_transaction_service(
    products: ProductService = Depends(get_product_service),
) -> TransactionService:
    return TransactionService(get_transactions_collection(), products)


async def get_chat_service() -> ChatService:
    return ChatService(get_database())


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """
    Resolves the bearer token to a user document.

    Raises:
        AuthenticationError: Missing/invalid token, or the account no longer exists
    """
    if credentials is None:
        raise AuthenticationError(constants.MSG_LOGIN_REQUIRED)

    user_id = decode_access_token(credentials.credentials)
    user = await users.find_user(user_id)
    if not user:
        logger.warning("Token for a deleted account", extra={"user_id": user_id})
        raise AuthenticationError(constants.MSG_LOGIN_REQUIRED)
    return user


async def require_superadmin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != constants.ROLE_SUPERADMIN:
        raise PermissionDeniedError(constants.MSG_SUPERADMIN_ONLY)
    return user


def get_transaction_filter(
    start: Optional[datetime] = Query(None, description="Inclusive lower bound (ISO 8601, report timezone unless an offset is given)"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound (ISO 8601, report timezone unless an offset is given)"),
    today: bool = Query(False, description="Only today's transactions, in the report timezone"),
) -> TransactionFilter:
    try:
        return TransactionFilter(start=start, end=end, today=today)
    except PydanticValidationError:
        raise ValidationError(constants.MSG_INVALID_DATE_RANGE)
