# skill_exchange/models/session.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, CheckConstraint, func
from sqlalchemy.orm import relationship
from skill_exchange.database import Base


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Session(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name="check_session_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("learning_requests.id", ondelete="SET NULL"), nullable=True)
    # NULL for AI-assisted sessions
    tutor_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    learner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=True)
    scheduled_at = Column(TIMESTAMP, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    status = Column(String(20), nullable=False, default=SessionStatus.SCHEDULED.value)
    tutor_notes = Column(Text)
    learner_notes = Column(Text)
    is_ai_session = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)
    completed_at = Column(TIMESTAMP, nullable=True)

    # Relationships
    request = relationship("LearningRequest", back_populates="session")
    tutor = relationship("User", foreign_keys=[tutor_id])
    learner = relationship("User", foreign_keys=[learner_id])
    skill = relationship("Skill")
    reviews = relationship("Review", back_populates="session")

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.tutor_id, self.learner_id)
