"""
kassa/services/user_service.py

Purpose: User accounts

- Registration and login
- Profile settings (username, password, photo)
- Chat contact list
- Role changes and deletion for superadmins
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from kassa.core.config import settings
from kassa.core.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ValidationError,
)
from kassa.core.logging import get_logger, LogContext
from kassa.core.security import hash_password, verify_password
from kassa.db.mongo import AVATAR_BUCKET
from kassa.schemas.user import RegisterRequest, UserProfile
from kassa.utils import constants

logger = get_logger(__name__)

ALLOWED_PHOTO_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def to_profile(user: Dict[str, Any]) -> UserProfile:
    """Maps a user document to its public profile."""
    photo_url = None
    if user.get("photo_id"):
        photo_url = f"{settings.API_PREFIX}/users/{user['_id']}/photo"
    return UserProfile(
        id=user["_id"],
        email=user["email"],
        username=user.get("username") or user["email"].split("@")[0],
        role=user.get("role") or constants.ROLE_USER,
        photo_url=photo_url,
        created_at=user.get("created_at"),
    )


def default_role_for(email: str) -> str:
    if email.lower() in settings.SUPERADMIN_EMAILS:
        return constants.ROLE_SUPERADMIN
    return constants.ROLE_USER


class UserService:
    """Service for user accounts and profiles."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db["users"]

    @property
    def avatars(self) -> AsyncIOMotorGridFSBucket:
        return AsyncIOMotorGridFSBucket(self.db, bucket_name=AVATAR_BUCKET)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def register(self, data: RegisterRequest) -> Dict[str, Any]:
        """
        Creates a new account.

        Raises:
            ConflictError: If the e-mail is already registered
        """
        if await self.users.find_one({"email": data.email}):
            raise ConflictError(constants.MSG_EMAIL_TAKEN)

        now = datetime.utcnow()
        user = {
            "_id": str(uuid.uuid4()),
            "email": data.email,
            "username": data.username or data.email.split("@")[0],
            "password_hash": hash_password(data.password),
            "role": default_role_for(data.email),
            "photo_id": None,
            "created_at": now,
            "updated_at": now,
        }

        try:
            await self.users.insert_one(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise ConflictError(constants.MSG_EMAIL_TAKEN)

        logger.info("New user registered", extra={"user_id": user["_id"]})
        return user

    async def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """
        Checks credentials.

        Raises:
            AuthenticationError: On unknown e-mail or wrong password
        """
        user = await self.users.find_one({"email": email})
        if not user or not verify_password(password, user.get("password_hash")):
            logger.warning("Failed login attempt")
            raise AuthenticationError(constants.MSG_LOGIN_FAILED)
        return user

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def find_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.users.find_one({"_id": user_id})

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        user = await self.find_user(user_id)
        if not user:
            raise ResourceNotFoundError(constants.MSG_USER_NOT_FOUND)
        return user

    async def list_users(self, exclude_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        All users ordered by username, optionally leaving one out
        (the caller, when building a chat contact list).
        """
        query: Dict[str, Any] = {}
        if exclude_user_id:
            query["_id"] = {"$ne": exclude_user_id}
        cursor = self.users.find(query, {"password_hash": 0}).sort("username", ASCENDING)
        return await cursor.to_list(length=None)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def update_username(self, user_id: str, username: str) -> Dict[str, Any]:
        with LogContext(user_id=user_id):
            user = await self.users.find_one_and_update(
                {"_id": user_id},
                {"$set": {"username": username, "updated_at": datetime.utcnow()}},
                return_document=True,
            )
            if not user:
                raise ResourceNotFoundError(constants.MSG_USER_NOT_FOUND)
            logger.info("Username updated")
            return user

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """
        Replaces the password after checking the current one.

        Raises:
            ValidationError: If the current password is wrong
        """
        with LogContext(user_id=user_id):
            user = await self.get_user(user_id)
            if not verify_password(current_password, user.get("password_hash")):
                logger.warning("Password change rejected: wrong current password")
                raise ValidationError(constants.MSG_CURRENT_PASSWORD_WRONG)

            await self.users.update_one(
                {"_id": user_id},
                {"$set": {"password_hash": hash_password(new_password), "updated_at": datetime.utcnow()}},
            )
            logger.info("Password changed")

    async def save_photo(self, user_id: str, filename: str, content_type: str, data: bytes) -> Dict[str, Any]:
        """
        Stores a new profile picture in GridFS and drops the old one.

        Raises:
            ValidationError: On a non-image upload, an empty one or one that is too large
        """
        if content_type not in ALLOWED_PHOTO_TYPES:
            raise ValidationError(constants.MSG_PHOTO_INVALID_TYPE)
        if not data:
            raise ValidationError(constants.MSG_PHOTO_EMPTY)
        if len(data) > settings.MAX_AVATAR_BYTES:
            raise ValidationError(constants.MSG_PHOTO_TOO_LARGE, details={"max_bytes": settings.MAX_AVATAR_BYTES})

        with LogContext(user_id=user_id):
            user = await self.get_user(user_id)

            photo_id = await self.avatars.upload_from_stream(
                filename or f"{user_id}-avatar",
                data,
                metadata={"user_id": user_id, "content_type": content_type},
            )

            updated = await self.users.find_one_and_update(
                {"_id": user_id},
                {"$set": {"photo_id": photo_id, "updated_at": datetime.utcnow()}},
                return_document=True,
            )

            if user.get("photo_id"):
                await self._delete_photo_file(user["photo_id"])

            logger.info(f"Profile photo stored ({len(data)} bytes)")
            return updated

    async def load_photo(self, user_id: str) -> Tuple[bytes, str]:
        """
        Returns (image bytes, content type) of a user's profile picture.

        Raises:
            ResourceNotFoundError: If the user has no picture
        """
        user = await self.get_user(user_id)
        if not user.get("photo_id"):
            raise ResourceNotFoundError(constants.MSG_PHOTO_NOT_FOUND)

        try:
            stream = await self.avatars.open_download_stream(user["photo_id"])
        except NoFile:
            raise ResourceNotFoundError(constants.MSG_PHOTO_NOT_FOUND)

        data = await stream.read()
        metadata = stream.metadata or {}
        return data, metadata.get("content_type", "application/octet-stream")

    async def _delete_photo_file(self, photo_id) -> None:
        try:
            await self.avatars.delete(photo_id)
        except NoFile:
            logger.warning(f"Profile photo {photo_id} already gone")

    # ------------------------------------------------------------------
    # User management (superadmin)
    # ------------------------------------------------------------------

    async def change_role(self, actor_id: str, target_id: str, role: str) -> Dict[str, Any]:
        """
        Raises:
            PermissionDeniedError: When the actor targets their own account
        """
        if actor_id == target_id:
            raise PermissionDeniedError(constants.MSG_CANNOT_CHANGE_OWN_ROLE)

        with LogContext(user_id=actor_id):
            user = await self.users.find_one_and_update(
                {"_id": target_id},
                {"$set": {"role": role, "updated_at": datetime.utcnow()}},
                return_document=True,
            )
            if not user:
                raise ResourceNotFoundError(constants.MSG_USER_NOT_FOUND)

            logger.info(f"Role of {target_id} changed to {role}")
            return user

    async def delete_user(self, actor_id: str, target_id: str) -> Dict[str, Any]:
        """
        Deletes an account together with its catalog, sales and photo.

        Chat history is kept so the other participant still sees it.

        Raises:
            PermissionDeniedError: When the actor targets their own account
        """
        if actor_id == target_id:
            raise PermissionDeniedError(constants.MSG_CANNOT_DELETE_SELF)

        with LogContext(user_id=actor_id):
            user = await self.get_user(target_id)

            products = await self.db["products"].delete_many({"user_id": target_id})
            transactions = await self.db["transactions"].delete_many({"user_id": target_id})
            if user.get("photo_id"):
                await self._delete_photo_file(user["photo_id"])
            await self.users.delete_one({"_id": target_id})

            logger.info(
                f"User {target_id} deleted "
                f"(products={products.deleted_count}, transactions={transactions.deleted_count})"
            )
            return user
