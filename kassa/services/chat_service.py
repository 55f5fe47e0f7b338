"""
kassa/services/chat_service.py

Purpose: One-to-one chat between registered users

- Deterministic chat id per pair of users
- Chat document created with the first message
- Messages listed oldest first
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from kassa.core.exceptions import ResourceNotFoundError, ValidationError
from kassa.core.logging import get_logger, LogContext
from kassa.schemas.chat import Chat, ChatMessage
from kassa.utils import constants

logger = get_logger(__name__)


def chat_id_for(uid1: str, uid2: str) -> str:
    """
    Same id whichever side asks: the two uids sorted and joined with "_".
    """
    return f"{uid1}_{uid2}" if uid1 < uid2 else f"{uid2}_{uid1}"


def to_message(doc: Dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        id=doc["_id"],
        chat_id=doc["chat_id"],
        sender_id=doc["sender_id"],
        text=doc["text"],
        timestamp=doc["timestamp"],
    )


def to_chat(doc: Dict[str, Any]) -> Chat:
    return Chat(
        id=doc["_id"],
        participant_ids=doc.get("participant_ids", []),
        last_message=doc.get("last_message"),
    )


class ChatService:
    """Service for chats and chat messages."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = db["users"]
        self.chats = db["chats"]
        self.messages = db["chat_messages"]

    async def _require_other_user(self, user_id: str, other_id: str) -> None:
        if user_id == other_id:
            raise ValidationError(constants.MSG_CANNOT_CHAT_SELF)
        if not await self.users.find_one({"_id": other_id}, {"_id": 1}):
            raise ResourceNotFoundError(constants.MSG_USER_NOT_FOUND)

    async def send_message(self, sender_id: str, recipient_id: str, text: str) -> ChatMessage:
        """
        Stores a message and updates the chat's last message.

        Raises:
            ValidationError: On empty text or when messaging oneself
            ResourceNotFoundError: If the recipient does not exist
        """
        text = text.strip()
        if not text:
            raise ValidationError(constants.MSG_EMPTY_MESSAGE)

        await self._require_other_user(sender_id, recipient_id)
        chat_id = chat_id_for(sender_id, recipient_id)

        with LogContext(user_id=sender_id, chat_id=chat_id):
            now = datetime.utcnow()

            # Upsert so the first message from either side creates exactly one chat
            await self.chats.update_one(
                {"_id": chat_id},
                {"$setOnInsert": {"participant_ids": sorted([sender_id, recipient_id])}},
                upsert=True,
            )

            doc = {
                "_id": str(uuid.uuid4()),
                "chat_id": chat_id,
                "sender_id": sender_id,
                "text": text,
                "timestamp": now,
            }
            await self.messages.insert_one(doc)

            await self.chats.update_one(
                {"_id": chat_id},
                {"$set": {"last_message": {"text": text, "sender_id": sender_id, "timestamp": now}}},
            )

            logger.debug("Chat message stored")
            return to_message(doc)

    async def list_messages(self, user_id: str, other_id: str) -> List[ChatMessage]:
        """
        History with another user. Still readable after that account is deleted.
        """
        if user_id == other_id:
            raise ValidationError(constants.MSG_CANNOT_CHAT_SELF)
        cursor = self.messages.find({"chat_id": chat_id_for(user_id, other_id)}).sort("timestamp", ASCENDING)
        return [to_message(doc) async for doc in cursor]

    async def list_chats(self, user_id: str) -> List[Chat]:
        """Chats the user takes part in, most recent activity first."""
        cursor = self.chats.find({"participant_ids": user_id}).sort("last_message.timestamp", DESCENDING)
        return [to_chat(doc) async for doc in cursor]
