# skill_exchange/crud/review.py
"""
Review CRUD Operations
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from skill_exchange.models.review import Review


def create_review(
    db: Session,
    session_id: int,
    reviewer_id: int,
    reviewee_id: int,
    rating: int,
    comment: Optional[str] = None
) -> Review:
    """
    Create a review of the other participant of a session.

    Args:
        db: Database session
        session_id: Session identifier
        reviewer_id: Author user ID
        reviewee_id: Reviewed user ID
        rating: Rating value (1-5)
        comment: Optional text comment

    Returns:
        Created Review object

    Raises:
        ValueError: If rating is out of range
    """
    if not (1 <= rating <= 5):
        raise ValueError("Rating must be between 1 and 5")

    review = Review(
        session_id=session_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    db.flush()
    return review


def get_review_by_reviewer(db: Session, session_id: int, reviewer_id: int) -> Optional[Review]:
    return db.query(Review).filter(
        Review.session_id == session_id,
        Review.reviewer_id == reviewer_id,
    ).first()


def list_received(db: Session, reviewee_id: int, limit: int = 10) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.reviewee_id == reviewee_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .limit(limit)
        .all()
    )


def average_rating(db: Session, reviewee_id: int) -> float:
    """
    Average received rating rounded to one decimal, 0.0 with no reviews.
    """
    avg = db.query(func.avg(Review.rating)).filter(Review.reviewee_id == reviewee_id).scalar()
    return round(float(avg), 1) if avg is not None else 0.0
