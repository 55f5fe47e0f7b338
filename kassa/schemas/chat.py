"""
kassa/schemas/chat.py

Pydantic models for one-to-one chat.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from kassa.utils import constants
from kassa.utils.validation_utils import sanitize_input


class ChatMessageCreate(BaseModel):
    text: str = Field(..., description="Message body")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = sanitize_input(v)
        if not v:
            raise ValueError(constants.MSG_EMPTY_MESSAGE)
        return v


class ChatMessage(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    text: str
    timestamp: datetime


class LastMessage(BaseModel):
    text: str
    sender_id: str
    timestamp: datetime


class Chat(BaseModel):
    id: str
    participant_ids: List[str]
    last_message: Optional[LastMessage] = None
