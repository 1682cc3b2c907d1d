# skill_exchange/crud/session.py
"""
Session CRUD Operations
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skill_exchange.models.session import Session as SessionModel, SessionStatus


def get_session(db: Session, session_id: int, for_update: bool = False) -> Optional[SessionModel]:
    query = db.query(SessionModel).filter(SessionModel.id == session_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def create_session(
    db: Session,
    learner_id: int,
    scheduled_at: datetime,
    duration_minutes: int = 60,
    tutor_id: Optional[int] = None,
    skill_id: Optional[int] = None,
    request_id: Optional[int] = None,
    is_ai_session: bool = False
) -> SessionModel:
    """
    Create a scheduled session.

    Args:
        db: Database session
        learner_id: Learner user ID
        scheduled_at: Start time (naive UTC)
        duration_minutes: Length of the session
        tutor_id: Tutor user ID, None for AI sessions
        skill_id: Optional skill
        request_id: Originating learning request, if any
        is_ai_session: True when no human tutor is involved

    Returns:
        Created Session object (flushed, not committed)
    """
    session = SessionModel(
        request_id=request_id,
        tutor_id=tutor_id,
        learner_id=learner_id,
        skill_id=skill_id,
        scheduled_at=scheduled_at,
        duration_minutes=duration_minutes,
        status=SessionStatus.SCHEDULED.value,
        is_ai_session=is_ai_session,
    )
    db.add(session)
    db.flush()
    return session


def _participant_filter(user_id: int):
    return or_(SessionModel.tutor_id == user_id, SessionModel.learner_id == user_id)


def list_upcoming(db: Session, user_id: int, now: datetime, limit: int = 10) -> List[SessionModel]:
    return (
        db.query(SessionModel)
        .filter(
            _participant_filter(user_id),
            SessionModel.status == SessionStatus.SCHEDULED.value,
            SessionModel.scheduled_at >= now,
        )
        .order_by(SessionModel.scheduled_at.asc(), SessionModel.id.asc())
        .limit(limit)
        .all()
    )


def list_completed(db: Session, user_id: int, limit: int = 20) -> List[SessionModel]:
    return (
        db.query(SessionModel)
        .filter(
            _participant_filter(user_id),
            SessionModel.status == SessionStatus.COMPLETED.value,
        )
        .order_by(SessionModel.completed_at.desc(), SessionModel.id.desc())
        .limit(limit)
        .all()
    )


def count_completed_as_tutor(db: Session, tutor_id: int) -> int:
    return db.query(func.count(SessionModel.id)).filter(
        SessionModel.tutor_id == tutor_id,
        SessionModel.status == SessionStatus.COMPLETED.value,
    ).scalar() or 0
