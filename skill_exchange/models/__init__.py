# skill_exchange/models/__init__.py
# Import models in dependency order
from .user import User, Profile
from .skill import Skill, UserSkill
from .request import LearningRequest, RequestStatus
from .session import Session, SessionStatus
from .credit import CreditTransaction, TransactionType
from .conversation import Conversation, Message
from .review import Review

__all__ = [
    "User",
    "Profile",
    "Skill",
    "UserSkill",
    "LearningRequest",
    "RequestStatus",
    "Session",
    "SessionStatus",
    "CreditTransaction",
    "TransactionType",
    "Conversation",
    "Message",
    "Review",
]
