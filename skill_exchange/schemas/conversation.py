from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from skill_exchange.schemas.profile import PublicUser


class ConversationCreate(BaseModel):
    other_user_id: int


class MessageCreate(BaseModel):
    content: str = Field(..., max_length=4000)


class MessageResponse(BaseModel):
    id: int
    conversation_id: int
    sender_id: int
    content: str
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LastMessage(BaseModel):
    content: str
    sender_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ConversationResponse(BaseModel):
    id: int
    participant_1: int
    participant_2: int
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    other_user: Optional[PublicUser] = None
    last_message: Optional[LastMessage] = None
    unread_count: int = 0
