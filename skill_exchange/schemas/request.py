from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skill_exchange.schemas.profile import PublicUser

# ======================
# LEARNING REQUEST BODIES
# ======================

class SendRequestBody(BaseModel):
    tutor_id: int
    message: str = Field(..., max_length=2000)
    skill_id: Optional[int] = None
    proposed_datetime: Optional[datetime] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        if not v or not v.strip():
            raise ValueError("message is required")
        return v.strip()


class AcceptRequestBody(BaseModel):
    scheduled_at: datetime
    duration_minutes: int = Field(60, gt=0, le=480)


# ======================
# LEARNING REQUEST RESPONSES
# ======================

class LearningRequestResponse(BaseModel):
    id: int
    learner_id: int
    tutor_id: int
    skill_id: Optional[int] = None
    message: Optional[str] = None
    proposed_datetime: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    skill_name: Optional[str] = None
    learner_profile: Optional[PublicUser] = None
    tutor_profile: Optional[PublicUser] = None

    model_config = ConfigDict(from_attributes=True)


class SendRequestResponse(BaseModel):
    success: bool = True
    request: LearningRequestResponse


class RequestStatusResponse(BaseModel):
    message: str
    status: str
