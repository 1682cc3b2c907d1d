from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.orm import relationship
from skill_exchange.database import Base

TEACH = "teach"
LEARN = "learn"
SKILL_TYPES = (TEACH, LEARN)


# skill_exchange/models/skill.py
class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(50))
    created_at = Column(TIMESTAMP, server_default=func.now())

    user_skills = relationship("UserSkill", back_populates="skill", cascade="all, delete-orphan")


class UserSkill(Base):
    """Junction row for both the teach set and the learn set of a user."""
    __tablename__ = "user_skills"
    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", "skill_type", name="uq_user_skill_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_id = Column(
        Integer,
        ForeignKey("skills.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_type = Column(String(20), nullable=False)  # 'teach' or 'learn'
    created_at = Column(TIMESTAMP, server_default=func.now())

    # Relationships
    skill = relationship("Skill", back_populates="user_skills")
    user = relationship("User", back_populates="user_skills")
