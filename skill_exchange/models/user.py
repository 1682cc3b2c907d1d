from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from skill_exchange.database import Base
from datetime import datetime
from decimal import Decimal


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="member")
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    user_skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")


# ---------------- PROFILE TABLE ----------------
class Profile(Base):
    __tablename__ = "profiles"

    id: int = Column(Integer, primary_key=True)
    user_id: int = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name: str = Column(String(100), nullable=False, index=True)
    email: str = Column(String(255), nullable=False)
    bio: str = Column(Text)
    avatar_url: str = Column(String(500))
    availability_status: str = Column(String(20), default="available")
    # Running balance; credit_transactions is the append-only history.
    credits: Decimal = Column(Numeric(10, 2), nullable=False, default=Decimal("3.00"))
    created_at: datetime = Column(TIMESTAMP, server_default=func.now(), nullable=False)
    updated_at: datetime = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    user = relationship("User", back_populates="profile")
