from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skill_exchange.schemas.credit import CreditAmount
from skill_exchange.schemas.skill import SkillSummary

AvailabilityStatus = Literal["available", "busy", "away"]


# ======================
# PROFILE SETUP / UPDATE
# ======================

class ProfileSetup(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    teach_skill_ids: List[int] = Field(default_factory=list)
    learn_skill_ids: List[int] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("bio")
    @classmethod
    def strip_bio(cls, v):
        if v is None:
            return None
        return v.strip() or None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    availability_status: Optional[AvailabilityStatus] = None


# ======================
# PROFILE RESPONSES
# ======================

class PublicUser(BaseModel):
    """Name and avatar shown next to requests, sessions, messages and reviews."""
    user_id: int
    name: str
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    user_id: int
    name: str
    email: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    availability_status: Optional[str] = None
    credits: CreditAmount
    teach_skills: List[SkillSummary] = Field(default_factory=list)
    learn_skills: List[SkillSummary] = Field(default_factory=list)


class TutorResponse(BaseModel):
    user_id: int
    name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    availability_status: Optional[str] = None
    credits: CreditAmount
    teach_skills: List[SkillSummary] = Field(default_factory=list)
    learn_skills: List[SkillSummary] = Field(default_factory=list)
    rating: float = 0.0
    session_count: int = 0
