# skill_exchange/api/messages.py
"""
Conversations & Messages API Router

Endpoints:
- POST /conversations/ - Get or create the conversation with another user
- GET /conversations/ - My conversations, latest activity first
- GET /conversations/{conversation_id}/messages - Thread (marks messages read)
- POST /conversations/{conversation_id}/messages - Send a message
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.conversation import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
)
from skill_exchange.services import conversation_service
from skill_exchange.utils.security import get_current_user

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("/", response_model=ConversationResponse)
def get_or_create_conversation(
    payload: ConversationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "opening conversation"):
        conversation = conversation_service.get_or_create_conversation(
            db, current_user.id, payload.other_user_id
        )
        return conversation_service.describe_conversation(db, conversation, current_user.id)


@router.get("/", response_model=List[ConversationResponse])
def list_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return conversation_service.list_conversations(db, current_user.id)


@router.get("/{conversation_id}/messages", response_model=List[MessageResponse])
def list_messages(
    conversation_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "loading messages"):
        return conversation_service.list_messages(db, conversation_id, current_user.id)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    conversation_id: int,
    payload: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "sending message"):
        return conversation_service.send_message(
            db, conversation_id, current_user.id, payload.content
        )
