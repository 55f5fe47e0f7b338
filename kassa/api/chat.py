"""
kassa/api/chat.py

Purpose: One-to-one chat endpoints

Messages are addressed by the other participant's user id; the chat id
is derived from both ids.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from kassa.api.deps import get_chat_service, get_current_user
from kassa.schemas.chat import Chat, ChatMessage, ChatMessageCreate
from kassa.services.chat_service import ChatService

router = APIRouter(prefix="/chats", tags=["Chat"])


@router.get("", response_model=List[Chat])
async def list_chats(
    user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
) -> List[Chat]:
    return await chats.list_chats(user["_id"])


@router.get("/{other_user_id}/messages", response_model=List[ChatMessage])
async def list_messages(
    other_user_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
) -> List[ChatMessage]:
    return await chats.list_messages(user["_id"], other_user_id)


@router.post("/{other_user_id}/messages", response_model=ChatMessage, status_code=status.HTTP_201_CREATED)
async def send_message(
    other_user_id: str,
    request: ChatMessageCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    chats: ChatService = Depends(get_chat_service),
) -> ChatMessage:
    return await chats.send_message(user["_id"], other_user_id, request.text)
