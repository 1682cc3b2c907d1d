# skill_exchange/schemas/__init__.py

# Auth schemas
from .auth import Token, RegisterRequest, LoginRequest

# Skill schemas
from .skill import Skill, SkillSummary, SkillLinkCreate

# Credit schemas
from .credit import (
    CreditAmount,
    BalanceResponse,
    CreditTransactionResponse,
    TopUpRequest,
    TopUpResponse,
)

# Profile schemas
from .profile import (
    ProfileSetup,
    ProfileUpdate,
    ProfileResponse,
    PublicUser,
    TutorResponse,
)

# Request and session schemas
from .request import (
    SendRequestBody,
    AcceptRequestBody,
    LearningRequestResponse,
    SendRequestResponse,
    RequestStatusResponse,
)
from .session import (
    SessionResponse,
    AcceptRequestResponse,
    CompleteSessionBody,
    CompleteSessionResponse,
    AiSessionCreate,
    SessionStatusResponse,
)

# Messaging schemas
from .conversation import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    LastMessage,
)

# Review schemas
from .review import ReviewCreate, ReviewResponse

__all__ = [
    "Token",
    "RegisterRequest",
    "LoginRequest",
    "Skill",
    "SkillSummary",
    "SkillLinkCreate",
    "CreditAmount",
    "BalanceResponse",
    "CreditTransactionResponse",
    "TopUpRequest",
    "TopUpResponse",
    "ProfileSetup",
    "ProfileUpdate",
    "ProfileResponse",
    "PublicUser",
    "TutorResponse",
    "SendRequestBody",
    "AcceptRequestBody",
    "LearningRequestResponse",
    "SendRequestResponse",
    "RequestStatusResponse",
    "SessionResponse",
    "AcceptRequestResponse",
    "CompleteSessionBody",
    "CompleteSessionResponse",
    "AiSessionCreate",
    "SessionStatusResponse",
    "ConversationCreate",
    "ConversationResponse",
    "MessageCreate",
    "MessageResponse",
    "LastMessage",
    "ReviewCreate",
    "ReviewResponse",
]
