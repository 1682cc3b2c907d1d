# skill_exchange/models/request.py
import enum

from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, CheckConstraint, func
from sqlalchemy.orm import relationship
from skill_exchange.database import Base


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LearningRequest(Base):
    __tablename__ = "learning_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'cancelled')",
            name="check_request_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tutor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=True)
    message = Column(Text)
    proposed_datetime = Column(TIMESTAMP, nullable=True)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    learner = relationship("User", foreign_keys=[learner_id])
    tutor = relationship("User", foreign_keys=[tutor_id])
    skill = relationship("Skill")
    session = relationship("Session", back_populates="request", uselist=False)
