from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from skill_exchange.schemas.credit import CreditAmount
from skill_exchange.schemas.profile import PublicUser

# ======================
# SESSION REQUEST MODELS
# ======================

class CompleteSessionBody(BaseModel):
    tutor_notes: Optional[str] = Field(None, max_length=2000)
    learner_notes: Optional[str] = Field(None, max_length=2000)


class AiSessionCreate(BaseModel):
    skill_id: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    duration_minutes: int = Field(30, gt=0, le=240)


# ======================
# SESSION RESPONSE MODELS
# ======================

class SessionResponse(BaseModel):
    id: int
    request_id: Optional[int] = None
    tutor_id: Optional[int] = None
    learner_id: int
    skill_id: Optional[int] = None
    scheduled_at: datetime
    duration_minutes: int
    status: str
    tutor_notes: Optional[str] = None
    learner_notes: Optional[str] = None
    is_ai_session: bool = False
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    skill_name: Optional[str] = None
    tutor_profile: Optional[PublicUser] = None
    learner_profile: Optional[PublicUser] = None

    model_config = ConfigDict(from_attributes=True)


class AcceptRequestResponse(BaseModel):
    success: bool = True
    session: SessionResponse


class CompleteSessionResponse(BaseModel):
    success: bool = True
    message: str
    credits_charged: CreditAmount
    credits_awarded: CreditAmount


class SessionStatusResponse(BaseModel):
    message: str
    status: str
