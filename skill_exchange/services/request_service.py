# skill_exchange/services/request_service.py
"""
Learning Request Workflow - Business Logic Service

send_request:   learner -> tutor, posts the request into their conversation
accept_request: tutor accepts a pending request, a Session is scheduled
reject_request: tutor declines a pending request
cancel_request: learner withdraws a pending request

Each operation is a single unit of work: rows are flushed as they are
created and committed once at the end.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import request as request_crud
from skill_exchange.crud import session as session_crud
from skill_exchange.crud import skill as skill_crud
from skill_exchange.exceptions import InsufficientCredits, NotAuthorized, NotFound, ValidationFailed
from skill_exchange.models.request import LearningRequest, RequestStatus
from skill_exchange.models.session import Session as SessionModel
from skill_exchange.services.conversation_service import ensure_conversation, post_message
from skill_exchange.services.credit_service import CreditPolicy
from skill_exchange.services.profile_service import public_user
from skill_exchange.utils.clock import as_naive_utc

logger = logging.getLogger(__name__)

REQUEST_MESSAGE_PREFIX = "Learning Request: "


def describe_request(db: Session, request: LearningRequest) -> Dict:
    """Request fields plus skill name and both parties' public profiles."""
    profiles = profile_crud.get_profiles_by_user_ids(db, [request.learner_id, request.tutor_id])
    return {
        "id": request.id,
        "learner_id": request.learner_id,
        "tutor_id": request.tutor_id,
        "skill_id": request.skill_id,
        "message": request.message,
        "proposed_datetime": request.proposed_datetime,
        "status": request.status,
        "created_at": request.created_at,
        "updated_at": request.updated_at,
        "skill_name": request.skill.name if request.skill else None,
        "learner_profile": public_user(profiles.get(request.learner_id)),
        "tutor_profile": public_user(profiles.get(request.tutor_id)),
    }


# =====================================
# SEND
# =====================================

def send_request(
    db: Session,
    learner_id: int,
    tutor_id: int,
    message: str,
    skill_id: Optional[int] = None,
    proposed_datetime: Optional[datetime] = None
) -> LearningRequest:
    """
    Create a pending learning request and post it into the pair's conversation.

    Checks run in this order and nothing is written when one fails.

    Args:
        db: Database session
        learner_id: Caller (the learner)
        tutor_id: Requested tutor
        message: Non-blank request text
        skill_id: Optional skill the request is about
        proposed_datetime: Optional proposed start time

    Returns:
        Created LearningRequest object (committed)

    Raises:
        ValidationFailed: Self-request or blank message
        InsufficientCredits: Caller has no profile or fewer than 1 credit
        NotFound: Tutor or skill does not exist
    """
    if learner_id == tutor_id:
        raise ValidationFailed("You cannot send a request to yourself")

    message = (message or "").strip()
    if not message:
        raise ValidationFailed("Message is required")

    learner_profile = profile_crud.get_profile_by_user_id(db, learner_id)
    if not learner_profile or Decimal(learner_profile.credits) < CreditPolicy.REQUEST_MINIMUM_BALANCE:
        logger.warning(
            "User %s tried to send a request with insufficient credits (%s)",
            learner_id, learner_profile.credits if learner_profile else None,
        )
        raise InsufficientCredits("Insufficient credits to send a request")

    if not profile_crud.get_profile_by_user_id(db, tutor_id):
        raise NotFound("Tutor not found")

    if skill_id is not None and not skill_crud.get_skill(db, skill_id):
        raise NotFound("Skill not found")

    request = request_crud.create_request(
        db,
        learner_id=learner_id,
        tutor_id=tutor_id,
        message=message,
        skill_id=skill_id,
        proposed_datetime=as_naive_utc(proposed_datetime),
    )

    conversation = ensure_conversation(db, learner_id, tutor_id)
    post_message(db, conversation, learner_id, f"{REQUEST_MESSAGE_PREFIX}{message}")

    db.commit()
    db.refresh(request)
    logger.info("Learning request %s sent from %s to %s", request.id, learner_id, tutor_id)
    return request


# =====================================
# TUTOR RESPONSES
# =====================================

def _get_pending_for_update(db: Session, request_id: int) -> LearningRequest:
    request = request_crud.get_request(db, request_id, for_update=True)
    if not request:
        raise NotFound("Request not found")
    return request


def accept_request(
    db: Session,
    tutor_id: int,
    request_id: int,
    scheduled_at: datetime,
    duration_minutes: int = 60
) -> SessionModel:
    """
    Accept a pending request and schedule the session.

    Returns:
        Created Session object (committed)

    Raises:
        NotFound: Unknown request
        NotAuthorized: Caller is not the request's tutor
        ValidationFailed: Request is not pending or duration is not positive
    """
    request = _get_pending_for_update(db, request_id)
    if request.tutor_id != tutor_id:
        raise NotAuthorized("Only the tutor can accept this request")
    if request.status != RequestStatus.PENDING.value:
        raise ValidationFailed("Request is no longer pending")
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationFailed("Duration must be positive")

    scheduled_at = as_naive_utc(scheduled_at)
    request.status = RequestStatus.ACCEPTED.value

    session = session_crud.create_session(
        db,
        learner_id=request.learner_id,
        tutor_id=request.tutor_id,
        skill_id=request.skill_id,
        request_id=request.id,
        scheduled_at=scheduled_at,
        duration_minutes=duration_minutes,
    )

    conversation = ensure_conversation(db, request.learner_id, tutor_id)
    post_message(
        db,
        conversation,
        tutor_id,
        f"Request accepted! Session scheduled for {scheduled_at:%Y-%m-%d %H:%M} UTC",
    )

    db.commit()
    db.refresh(session)
    logger.info("Request %s accepted, session %s scheduled", request.id, session.id)
    return session


def reject_request(db: Session, tutor_id: int, request_id: int) -> LearningRequest:
    request = _get_pending_for_update(db, request_id)
    if request.tutor_id != tutor_id:
        raise NotAuthorized("Only the tutor can reject this request")
    if request.status != RequestStatus.PENDING.value:
        raise ValidationFailed("Request is no longer pending")

    request.status = RequestStatus.REJECTED.value
    conversation = ensure_conversation(db, request.learner_id, tutor_id)
    post_message(db, conversation, tutor_id, "Request declined.")

    db.commit()
    db.refresh(request)
    logger.info("Request %s rejected by tutor %s", request.id, tutor_id)
    return request


def cancel_request(db: Session, learner_id: int, request_id: int) -> LearningRequest:
    request = _get_pending_for_update(db, request_id)
    if request.learner_id != learner_id:
        raise NotAuthorized("Only the learner can cancel this request")
    if request.status != RequestStatus.PENDING.value:
        raise ValidationFailed("Request is no longer pending")

    request.status = RequestStatus.CANCELLED.value
    db.commit()
    db.refresh(request)
    logger.info("Request %s cancelled by learner %s", request.id, learner_id)
    return request


# =====================================
# LISTINGS
# =====================================

def list_incoming(db: Session, tutor_id: int) -> List[Dict]:
    return [describe_request(db, r) for r in request_crud.list_pending_for_tutor(db, tutor_id)]


def list_outgoing(db: Session, learner_id: int) -> List[Dict]:
    return [describe_request(db, r) for r in request_crud.list_pending_for_learner(db, learner_id)]
