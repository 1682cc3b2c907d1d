# skill_exchange/api/tutors.py
"""
Tutor discovery endpoints.

- GET /tutors/?q= - Search tutors by name or skill
- GET /tutors/{identifier} - Tutor card by user id or name
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.profile import TutorResponse
from skill_exchange.services import tutor_service
from skill_exchange.utils.security import get_current_user

router = APIRouter(prefix="/tutors", tags=["tutors"])


@router.get("/", response_model=List[TutorResponse])
def search_tutors(
    q: Optional[str] = Query(None, max_length=100, description="Name or skill to match"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return tutor_service.search_tutors(db, current_user.id, q)


@router.get("/{identifier}", response_model=TutorResponse)
def get_tutor_profile(
    identifier: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "loading tutor profile"):
        return tutor_service.get_tutor_profile(db, identifier)
