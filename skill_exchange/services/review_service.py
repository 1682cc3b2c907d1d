# skill_exchange/services/review_service.py
"""
Review Service Layer

Either participant of a completed human session may review the other one,
once per session.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import review as review_crud
from skill_exchange.crud import session as session_crud
from skill_exchange.exceptions import NotAuthorized, NotFound, ValidationFailed
from skill_exchange.models.review import Review
from skill_exchange.models.session import SessionStatus
from skill_exchange.services.profile_service import public_user

logger = logging.getLogger(__name__)


# ======================
# REVIEW SUBMISSION
# ======================

def submit_review(
    db: Session,
    session_id: int,
    reviewer_id: int,
    rating: int,
    comment: Optional[str] = None
) -> Review:
    """
    Submit a review of the other participant of a completed session.

    Args:
        db: Database session
        session_id: Session identifier
        reviewer_id: Caller user ID
        rating: Rating value (1-5)
        comment: Optional text comment

    Returns:
        Created Review object (committed)

    Raises:
        NotFound: Unknown session
        NotAuthorized: Caller did not take part in the session
        ValidationFailed: Session not completed, AI session, bad rating or duplicate
    """
    session = session_crud.get_session(db, session_id)
    if not session:
        raise NotFound("Session not found")
    if not session.has_participant(reviewer_id):
        raise NotAuthorized("You are not a participant in this session")
    if session.status != SessionStatus.COMPLETED.value:
        raise ValidationFailed("Only completed sessions can be reviewed")
    if session.is_ai_session or session.tutor_id is None:
        raise ValidationFailed("AI sessions cannot be reviewed")
    if not (1 <= rating <= 5):
        raise ValidationFailed("Rating must be between 1 and 5")
    if review_crud.get_review_by_reviewer(db, session_id, reviewer_id):
        raise ValidationFailed("You have already reviewed this session")

    reviewee_id = session.learner_id if reviewer_id == session.tutor_id else session.tutor_id
    review = review_crud.create_review(
        db=db,
        session_id=session_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment,
    )
    db.commit()
    db.refresh(review)
    logger.info("User %s reviewed user %s for session %s (%s stars)",
                reviewer_id, reviewee_id, session_id, rating)
    return review


def describe_review(db: Session, review: Review) -> Dict:
    return {
        "id": review.id,
        "session_id": review.session_id,
        "reviewer_id": review.reviewer_id,
        "reviewee_id": review.reviewee_id,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
        "reviewer_profile": public_user(profile_crud.get_profile_by_user_id(db, review.reviewer_id)),
    }


def list_reviews_for_user(db: Session, user_id: int, limit: int = 10) -> List[Dict]:
    """Latest reviews received by a user."""
    return [describe_review(db, r) for r in review_crud.list_received(db, user_id, limit=limit)]
