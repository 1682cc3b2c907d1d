from sqlalchemy import Column, Integer, Text, ForeignKey, TIMESTAMP, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship

from skill_exchange.database import Base


class Conversation(Base):
    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("participant_1", "participant_2", name="unique_conversation"),
        CheckConstraint("participant_1 < participant_2", name="check_participant_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    participant_1 = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_2 = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    last_message_at = Column(TIMESTAMP, server_default=func.now())
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.id",
    )

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.participant_1, self.participant_2)

    def other_participant(self, user_id: int) -> int:
        return self.participant_2 if self.participant_1 == user_id else self.participant_1


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    read_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")
