# skill_exchange/models/credit.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, TIMESTAMP, Enum, func
from sqlalchemy.orm import relationship
from skill_exchange.database import Base
import enum


class TransactionType(str, enum.Enum):
    TEACHING = "teaching"
    LEARNING = "learning"
    AI_SESSION = "ai_session"
    WELCOME_BONUS = "welcome_bonus"
    TOP_UP = "top_up"


class CreditTransaction(Base):
    """Append-only ledger row. Never updated after insert."""
    __tablename__ = "credit_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Signed: negative for debits, positive for credits
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(
        Enum(
            TransactionType,
            name="credit_transaction_type",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(255))
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User")
    session = relationship("Session", foreign_keys=[session_id])
