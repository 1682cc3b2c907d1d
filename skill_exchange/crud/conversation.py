# skill_exchange/crud/conversation.py
"""
Conversation & Message CRUD Operations
"""

from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skill_exchange.models.conversation import Conversation, Message


def normalize_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    """Order two participant ids so the smaller one is participant_1."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


# ======================
# CONVERSATION CRUD
# ======================

def get_conversation(db: Session, conversation_id: int) -> Optional[Conversation]:
    return db.query(Conversation).filter(Conversation.id == conversation_id).first()


def get_conversation_between(db: Session, user_a: int, user_b: int) -> Optional[Conversation]:
    first, second = normalize_pair(user_a, user_b)
    return db.query(Conversation).filter(
        Conversation.participant_1 == first,
        Conversation.participant_2 == second,
    ).first()


def create_conversation(db: Session, user_a: int, user_b: int) -> Conversation:
    first, second = normalize_pair(user_a, user_b)
    conversation = Conversation(participant_1=first, participant_2=second)
    db.add(conversation)
    db.flush()
    return conversation


def list_for_user(db: Session, user_id: int) -> List[Conversation]:
    return (
        db.query(Conversation)
        .filter(or_(Conversation.participant_1 == user_id, Conversation.participant_2 == user_id))
        .order_by(Conversation.last_message_at.desc(), Conversation.id.desc())
        .all()
    )


# ======================
# MESSAGE CRUD
# ======================

def create_message(
    db: Session,
    conversation: Conversation,
    sender_id: int,
    content: str,
    sent_at: datetime
) -> Message:
    """
    Insert a message and bump the conversation's last_message_at.

    Args:
        db: Database session
        conversation: Target conversation
        sender_id: Author user ID (must be a participant)
        content: Message body
        sent_at: Timestamp used for both the message and the bump

    Returns:
        Created Message object
    """
    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        content=content,
        created_at=sent_at,
    )
    db.add(message)
    conversation.last_message_at = sent_at
    db.flush()
    return message


def list_messages(db: Session, conversation_id: int) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def get_last_message(db: Session, conversation_id: int) -> Optional[Message]:
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .first()
    )


def count_unread(db: Session, conversation_id: int, reader_id: int) -> int:
    """Messages written by the other participant that the reader has not opened."""
    return db.query(func.count(Message.id)).filter(
        Message.conversation_id == conversation_id,
        Message.sender_id != reader_id,
        Message.read_at.is_(None),
    ).scalar() or 0


def mark_read(db: Session, conversation_id: int, reader_id: int, read_at: datetime) -> int:
    unread = db.query(Message).filter(
        Message.conversation_id == conversation_id,
        Message.sender_id != reader_id,
        Message.read_at.is_(None),
    ).all()
    for message in unread:
        message.read_at = read_at
    db.flush()
    return len(unread)
