# skill_exchange/schemas/review.py
"""
Review & Rating Pydantic Schemas
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from skill_exchange.schemas.profile import PublicUser


class ReviewCreate(BaseModel):
    """Schema for reviewing the other participant of a session"""
    session_id: int = Field(..., description="Session identifier")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, max_length=1000, description="Review comment (max 1000 chars)")

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, v):
        """Validate comment is not just whitespace"""
        if v is not None and v.strip() == "":
            raise ValueError("Comment cannot be empty or just whitespace")
        return v.strip() if v else None


class ReviewResponse(BaseModel):
    id: int
    session_id: int
    reviewer_id: int
    reviewee_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewer_profile: Optional[PublicUser] = None

    model_config = ConfigDict(from_attributes=True)
