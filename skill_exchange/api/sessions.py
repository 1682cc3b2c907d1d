# skill_exchange/api/sessions.py
"""
Session API Router

Endpoints:
- POST /sessions/ai - Book an AI-assisted session
- GET /sessions/upcoming - My next scheduled sessions
- GET /sessions/completed - My latest completed sessions
- GET /sessions/{session_id} - Session detail (participants only)
- PATCH /sessions/{session_id}/start - Mark in progress
- PATCH /sessions/{session_id}/complete - Complete and settle credits
- PATCH /sessions/{session_id}/cancel - Cancel without credit movement
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.session import (
    AiSessionCreate,
    CompleteSessionBody,
    CompleteSessionResponse,
    SessionResponse,
    SessionStatusResponse,
)
from skill_exchange.services import session_service
from skill_exchange.utils.security import get_current_user

router = APIRouter(prefix="/sessions", tags=["sessions"])


# ======================
# AI SESSION BOOKING
# ======================
@router.post("/ai", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def book_ai_session(
    payload: AiSessionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Book a session with the AI tutor; 0.5 credits are charged on completion."""
    with service_errors(db, "booking AI session"):
        session = session_service.book_ai_session(
            db,
            learner_id=current_user.id,
            skill_id=payload.skill_id,
            scheduled_at=payload.scheduled_at,
            duration_minutes=payload.duration_minutes,
        )
        return session_service.describe_session(db, session)


# ======================
# LISTINGS
# ======================
@router.get("/upcoming", response_model=List[SessionResponse])
def list_upcoming_sessions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return session_service.list_upcoming(db, current_user.id)


@router.get("/completed", response_model=List[SessionResponse])
def list_completed_sessions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return session_service.list_completed(db, current_user.id)


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "loading session"):
        session = session_service.get_session(db, session_id, current_user.id)
        return session_service.describe_session(db, session)


# ======================
# STATUS TRANSITIONS
# ======================
@router.patch("/{session_id}/start", response_model=SessionStatusResponse)
def start_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "starting session"):
        session = session_service.start_session(db, current_user.id, session_id)
        return {"message": "Session started", "status": session.status}


@router.patch("/{session_id}/complete", response_model=CompleteSessionResponse)
def complete_session(
    session_id: int,
    payload: Optional[CompleteSessionBody] = Body(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Complete a session and move credits.

    Human session: learner pays 1 credit, tutor earns 1 credit.
    AI session: learner pays 0.5 credits.
    """
    payload = payload or CompleteSessionBody()
    with service_errors(db, "completing session"):
        return session_service.complete_session(
            db,
            user_id=current_user.id,
            session_id=session_id,
            tutor_notes=payload.tutor_notes,
            learner_notes=payload.learner_notes,
        )


@router.patch("/{session_id}/cancel", response_model=SessionStatusResponse)
def cancel_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "cancelling session"):
        session = session_service.cancel_session(db, current_user.id, session_id)
        return {"message": "Session cancelled", "status": session.status}
