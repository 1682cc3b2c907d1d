# skill_exchange/services/session_service.py
"""
Session Lifecycle & Settlement Service

Completing a session is where credits move:

    human session: learner -1 (learning), tutor +1 (teaching)
    AI session:    learner -0.5 (ai_session), nobody is paid

The session row and both participants' profile rows are locked for the
duration of the settlement, profiles in ascending user id order. A session
cannot be completed twice and a balance cannot be spent twice by concurrent
requests.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import session as session_crud
from skill_exchange.crud import skill as skill_crud
from skill_exchange.exceptions import InsufficientCredits, NotAuthorized, NotFound, ValidationFailed
from skill_exchange.models.credit import TransactionType
from skill_exchange.models.session import Session as SessionModel, SessionStatus
from skill_exchange.services import credit_service
from skill_exchange.services.credit_service import CreditPolicy
from skill_exchange.services.profile_service import public_user
from skill_exchange.utils.clock import as_naive_utc, utcnow

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def describe_session(db: Session, session: SessionModel) -> Dict:
    profiles = profile_crud.get_profiles_by_user_ids(db, [session.tutor_id, session.learner_id])
    return {
        "id": session.id,
        "request_id": session.request_id,
        "tutor_id": session.tutor_id,
        "learner_id": session.learner_id,
        "skill_id": session.skill_id,
        "scheduled_at": session.scheduled_at,
        "duration_minutes": session.duration_minutes,
        "status": session.status,
        "tutor_notes": session.tutor_notes,
        "learner_notes": session.learner_notes,
        "is_ai_session": bool(session.is_ai_session),
        "created_at": session.created_at,
        "completed_at": session.completed_at,
        "skill_name": session.skill.name if session.skill else None,
        "tutor_profile": public_user(profiles.get(session.tutor_id)),
        "learner_profile": public_user(profiles.get(session.learner_id)),
    }


def _get_participant_session(
    db: Session,
    session_id: int,
    user_id: int,
    for_update: bool = False
) -> SessionModel:
    session = session_crud.get_session(db, session_id, for_update=for_update)
    if not session:
        raise NotFound("Session not found")
    if not session.has_participant(user_id):
        raise NotAuthorized("You are not a participant in this session")
    return session


def get_session(db: Session, session_id: int, user_id: int) -> SessionModel:
    return _get_participant_session(db, session_id, user_id)


# =====================================
# COMPLETION (credit settlement)
# =====================================

def complete_session(
    db: Session,
    user_id: int,
    session_id: int,
    tutor_notes: Optional[str] = None,
    learner_notes: Optional[str] = None
) -> Dict:
    """
    Mark a session completed and settle credits.

    Args:
        db: Database session
        user_id: Caller, must be the tutor or the learner
        session_id: Session to complete
        tutor_notes: Replaces the stored tutor notes when given
        learner_notes: Replaces the stored learner notes when given

    Returns:
        Dictionary with success, message, credits_charged, credits_awarded

    Raises:
        NotFound: Unknown session or learner profile missing
        NotAuthorized: Caller is not a participant
        ValidationFailed: Session already completed or cancelled
        InsufficientCredits: Learner balance below the session cost
    """
    session = _get_participant_session(db, session_id, user_id, for_update=True)

    if session.status == SessionStatus.COMPLETED.value:
        raise ValidationFailed("Session is already completed")
    if session.status == SessionStatus.CANCELLED.value:
        raise ValidationFailed("Cancelled sessions cannot be completed")

    is_ai = bool(session.is_ai_session)
    participant_ids = [session.learner_id] if is_ai else [session.learner_id, session.tutor_id]
    locked = {p.user_id: p for p in profile_crud.lock_profiles(db, participant_ids)}

    learner_profile = locked.get(session.learner_id)
    if not learner_profile:
        raise NotFound("Learner profile not found")

    cost = CreditPolicy.AI_SESSION_COST if is_ai else CreditPolicy.HUMAN_SESSION_COST

    if Decimal(learner_profile.credits) < cost:
        logger.warning(
            "Session %s completion refused: learner %s has %s credits, needs %s",
            session.id, session.learner_id, learner_profile.credits, cost,
        )
        raise InsufficientCredits("Insufficient credits")

    session.status = SessionStatus.COMPLETED.value
    session.completed_at = utcnow()
    if tutor_notes is not None:
        session.tutor_notes = tutor_notes
    if learner_notes is not None:
        session.learner_notes = learner_notes

    awarded = ZERO
    if is_ai:
        credit_service.apply_movement(
            db,
            learner_profile,
            -cost,
            TransactionType.AI_SESSION,
            description="AI Learning Session",
            session_id=session.id,
        )
    else:
        credit_service.apply_movement(
            db,
            learner_profile,
            -cost,
            TransactionType.LEARNING,
            description="Human tutoring session",
            session_id=session.id,
        )
        tutor_profile = locked.get(session.tutor_id)
        if tutor_profile:
            credit_service.apply_movement(
                db,
                tutor_profile,
                CreditPolicy.TUTOR_REWARD,
                TransactionType.TEACHING,
                description="Teaching session completed",
                session_id=session.id,
            )
            awarded = CreditPolicy.TUTOR_REWARD
        else:
            logger.warning("Tutor %s of session %s has no profile; reward skipped",
                           session.tutor_id, session.id)

    db.commit()
    logger.info(
        "Session %s completed by user %s: charged %s, awarded %s",
        session.id, user_id, cost, awarded,
    )
    return {
        "success": True,
        "message": "Session completed and credits transferred",
        "credits_charged": cost,
        "credits_awarded": awarded,
    }


# =====================================
# AI SESSIONS
# =====================================

def book_ai_session(
    db: Session,
    learner_id: int,
    skill_id: Optional[int] = None,
    scheduled_at: Optional[datetime] = None,
    duration_minutes: int = 30
) -> SessionModel:
    """Book a session with the AI tutor. Credits are charged on completion."""
    profile = profile_crud.get_profile_by_user_id(db, learner_id)
    if not profile:
        raise NotFound("Profile not found")
    if Decimal(profile.credits) < CreditPolicy.AI_BOOKING_MINIMUM_BALANCE:
        raise InsufficientCredits("Insufficient credits for an AI session")
    if skill_id is not None and not skill_crud.get_skill(db, skill_id):
        raise NotFound("Skill not found")

    session = session_crud.create_session(
        db,
        learner_id=learner_id,
        tutor_id=None,
        skill_id=skill_id,
        scheduled_at=as_naive_utc(scheduled_at) or utcnow().replace(microsecond=0),
        duration_minutes=duration_minutes,
        is_ai_session=True,
    )
    db.commit()
    db.refresh(session)
    logger.info("AI session %s booked by learner %s", session.id, learner_id)
    return session


# =====================================
# STATUS TRANSITIONS
# =====================================

def start_session(db: Session, user_id: int, session_id: int) -> SessionModel:
    session = _get_participant_session(db, session_id, user_id, for_update=True)
    if session.status != SessionStatus.SCHEDULED.value:
        raise ValidationFailed("Only scheduled sessions can be started")

    session.status = SessionStatus.IN_PROGRESS.value
    db.commit()
    db.refresh(session)
    return session


def cancel_session(db: Session, user_id: int, session_id: int) -> SessionModel:
    session = _get_participant_session(db, session_id, user_id, for_update=True)
    if session.status not in (SessionStatus.SCHEDULED.value, SessionStatus.IN_PROGRESS.value):
        raise ValidationFailed(f"Session is already {session.status}")

    session.status = SessionStatus.CANCELLED.value
    db.commit()
    db.refresh(session)
    logger.info("Session %s cancelled by user %s", session.id, user_id)
    return session


# =====================================
# LISTINGS
# =====================================

def list_upcoming(db: Session, user_id: int) -> List[Dict]:
    sessions = session_crud.list_upcoming(db, user_id, now=utcnow(), limit=10)
    return [describe_session(db, s) for s in sessions]


def list_completed(db: Session, user_id: int) -> List[Dict]:
    return [describe_session(db, s) for s in session_crud.list_completed(db, user_id, limit=20)]
