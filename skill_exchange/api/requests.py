# skill_exchange/api/requests.py
"""
Learning Request API Router

Endpoints:
- POST /requests/ - Send a learning request to a tutor
- PATCH /requests/{request_id}/accept - Tutor accepts and schedules a session
- PATCH /requests/{request_id}/reject - Tutor declines
- PATCH /requests/{request_id}/cancel - Learner withdraws
- GET /requests/incoming - Pending requests addressed to me
- GET /requests/outgoing - Pending requests I sent
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.request import (
    AcceptRequestBody,
    LearningRequestResponse,
    RequestStatusResponse,
    SendRequestBody,
    SendRequestResponse,
)
from skill_exchange.schemas.session import AcceptRequestResponse
from skill_exchange.services import request_service
from skill_exchange.services.session_service import describe_session
from skill_exchange.utils.security import get_current_user

router = APIRouter(prefix="/requests", tags=["requests"])


# ======================
# SEND REQUEST
# ======================
@router.post("/", response_model=SendRequestResponse, status_code=status.HTTP_201_CREATED)
def send_request(
    payload: SendRequestBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Send a learning request.

    Requirements:
    - Tutor must be someone else and must have a profile
    - Caller must hold at least 1 credit (not deducted here)

    The request text is also posted into the learner/tutor conversation.
    """
    with service_errors(db, "sending learning request"):
        request = request_service.send_request(
            db,
            learner_id=current_user.id,
            tutor_id=payload.tutor_id,
            message=payload.message,
            skill_id=payload.skill_id,
            proposed_datetime=payload.proposed_datetime,
        )
        return {"success": True, "request": request_service.describe_request(db, request)}


# ======================
# TUTOR ACTIONS
# ======================
@router.patch(
    "/{request_id}/accept",
    response_model=AcceptRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def accept_request(
    request_id: int,
    payload: AcceptRequestBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Accept a pending request; returns the scheduled session."""
    with service_errors(db, "accepting learning request"):
        session = request_service.accept_request(
            db,
            tutor_id=current_user.id,
            request_id=request_id,
            scheduled_at=payload.scheduled_at,
            duration_minutes=payload.duration_minutes,
        )
        return {"success": True, "session": describe_session(db, session)}


@router.patch("/{request_id}/reject", response_model=RequestStatusResponse)
def reject_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "rejecting learning request"):
        request = request_service.reject_request(db, current_user.id, request_id)
        return {"message": "Request rejected", "status": request.status}


# ======================
# LEARNER ACTIONS
# ======================
@router.patch("/{request_id}/cancel", response_model=RequestStatusResponse)
def cancel_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "cancelling learning request"):
        request = request_service.cancel_request(db, current_user.id, request_id)
        return {"message": "Request cancelled", "status": request.status}


# ======================
# LISTINGS
# ======================
@router.get("/incoming", response_model=List[LearningRequestResponse])
def list_incoming_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return request_service.list_incoming(db, current_user.id)


@router.get("/outgoing", response_model=List[LearningRequestResponse])
def list_outgoing_requests(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return request_service.list_outgoing(db, current_user.id)
