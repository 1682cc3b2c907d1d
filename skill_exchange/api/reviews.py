# skill_exchange/api/reviews.py
"""
Review & Rating API Router

Endpoints:
- POST /reviews/ - Review the other participant of a completed session
- GET /reviews/user/{user_id} - Latest reviews a user received
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.review import ReviewCreate, ReviewResponse
from skill_exchange.services import review_service
from skill_exchange.utils.security import get_current_user

router = APIRouter(prefix="/reviews", tags=["reviews"])


# ======================
# SUBMIT REVIEW
# ======================
@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    review: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Submit a review for a completed session.

    Requirements:
    - Session must be completed and have a human tutor
    - Caller must be the tutor or the learner of the session
    - One review per participant per session
    - Rating must be 1-5, comment max 1000 characters
    """
    with service_errors(db, "submitting review"):
        created = review_service.submit_review(
            db,
            session_id=review.session_id,
            reviewer_id=current_user.id,
            rating=review.rating,
            comment=review.comment,
        )
        return review_service.describe_review(db, created)


# ======================
# REVIEWS RECEIVED
# ======================
@router.get("/user/{user_id}", response_model=List[ReviewResponse])
def list_reviews_for_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return review_service.list_reviews_for_user(db, user_id)
