# skill_exchange/crud/request.py
"""
Learning Request CRUD Operations
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from skill_exchange.models.request import LearningRequest, RequestStatus


def get_request(db: Session, request_id: int, for_update: bool = False) -> Optional[LearningRequest]:
    """
    Get a learning request by its ID.

    Args:
        db: Database session
        request_id: Request identifier
        for_update: Lock the row so two tutors' clicks cannot both accept it

    Returns:
        LearningRequest object or None if not found
    """
    query = db.query(LearningRequest).filter(LearningRequest.id == request_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def create_request(
    db: Session,
    learner_id: int,
    tutor_id: int,
    message: str,
    skill_id: Optional[int] = None,
    proposed_datetime: Optional[datetime] = None
) -> LearningRequest:
    """
    Create a pending learning request.

    Returns:
        Created LearningRequest object (flushed, not committed)
    """
    request = LearningRequest(
        learner_id=learner_id,
        tutor_id=tutor_id,
        skill_id=skill_id,
        message=message,
        proposed_datetime=proposed_datetime,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    db.flush()
    return request


def list_pending_for_tutor(db: Session, tutor_id: int) -> List[LearningRequest]:
    return (
        db.query(LearningRequest)
        .filter(
            LearningRequest.tutor_id == tutor_id,
            LearningRequest.status == RequestStatus.PENDING.value,
        )
        .order_by(LearningRequest.created_at.desc(), LearningRequest.id.desc())
        .all()
    )


def list_pending_for_learner(db: Session, learner_id: int) -> List[LearningRequest]:
    return (
        db.query(LearningRequest)
        .filter(
            LearningRequest.learner_id == learner_id,
            LearningRequest.status == RequestStatus.PENDING.value,
        )
        .order_by(LearningRequest.created_at.desc(), LearningRequest.id.desc())
        .all()
    )
