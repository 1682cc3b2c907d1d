# skill_exchange/services/conversation_service.py
"""
Direct messaging between two users.

A pair of users shares exactly one conversation, stored with
``participant_1 < participant_2`` so lookups do not depend on who asks.
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from skill_exchange.crud import conversation as conversation_crud
from skill_exchange.crud import profile as profile_crud
from skill_exchange.exceptions import NotAuthorized, NotFound, ValidationFailed
from skill_exchange.models.conversation import Conversation, Message
from skill_exchange.services.profile_service import public_user
from skill_exchange.utils.clock import utcnow

logger = logging.getLogger(__name__)


def ensure_conversation(db: Session, user_a: int, user_b: int) -> Conversation:
    """Get or lazily create the conversation between two users (no commit)."""
    conversation = conversation_crud.get_conversation_between(db, user_a, user_b)
    if conversation:
        return conversation
    return conversation_crud.create_conversation(db, user_a, user_b)


def post_message(db: Session, conversation: Conversation, sender_id: int, content: str) -> Message:
    """Insert a message without committing; used by the request handlers too."""
    return conversation_crud.create_message(
        db,
        conversation=conversation,
        sender_id=sender_id,
        content=content,
        sent_at=utcnow(),
    )


def get_or_create_conversation(db: Session, user_id: int, other_user_id: int) -> Conversation:
    if user_id == other_user_id:
        raise ValidationFailed("You cannot start a conversation with yourself")
    if not profile_crud.get_user_by_id(db, other_user_id):
        raise NotFound("User not found")

    conversation = ensure_conversation(db, user_id, other_user_id)
    db.commit()
    db.refresh(conversation)
    return conversation


def get_participant_conversation(db: Session, conversation_id: int, user_id: int) -> Conversation:
    conversation = conversation_crud.get_conversation(db, conversation_id)
    if not conversation:
        raise NotFound("Conversation not found")
    if not conversation.has_participant(user_id):
        raise NotAuthorized("You are not a participant in this conversation")
    return conversation


def describe_conversation(db: Session, conversation: Conversation, user_id: int) -> Dict:
    other_id = conversation.other_participant(user_id)
    other_profile = profile_crud.get_profile_by_user_id(db, other_id)
    return {
        "id": conversation.id,
        "participant_1": conversation.participant_1,
        "participant_2": conversation.participant_2,
        "last_message_at": conversation.last_message_at,
        "created_at": conversation.created_at,
        "other_user": public_user(other_profile),
        "last_message": conversation_crud.get_last_message(db, conversation.id),
        "unread_count": conversation_crud.count_unread(db, conversation.id, user_id),
    }


def list_conversations(db: Session, user_id: int) -> List[Dict]:
    """Caller's conversations, most recent activity first."""
    return [
        describe_conversation(db, conversation, user_id)
        for conversation in conversation_crud.list_for_user(db, user_id)
    ]


def list_messages(db: Session, conversation_id: int, user_id: int) -> List[Message]:
    """
    Messages oldest first. Opening the thread marks the other party's
    messages as read.
    """
    conversation = get_participant_conversation(db, conversation_id, user_id)
    marked = conversation_crud.mark_read(db, conversation.id, user_id, utcnow())
    if marked:
        db.commit()
    return conversation_crud.list_messages(db, conversation.id)


def send_message(db: Session, conversation_id: int, sender_id: int, content: str) -> Message:
    conversation = get_participant_conversation(db, conversation_id, sender_id)
    content = (content or "").strip()
    if not content:
        raise ValidationFailed("Message cannot be empty")

    message = post_message(db, conversation, sender_id, content)
    db.commit()
    db.refresh(message)
    logger.debug("Message %s posted in conversation %s", message.id, conversation.id)
    return message
