# skill_exchange/services/profile_service.py
"""
Profile Setup & Maintenance Service

A registered user has an auth identity but no public profile. Setup creates
the profile with the welcome balance and its first teach/learn skills in one
unit of work.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import credit as credit_crud
from skill_exchange.crud import skill as skill_crud
from skill_exchange.exceptions import NotFound, ValidationFailed
from skill_exchange.models.credit import TransactionType
from skill_exchange.models.skill import TEACH, LEARN
from skill_exchange.models.user import Profile, User
from skill_exchange.services.credit_service import CreditPolicy

logger = logging.getLogger(__name__)


def _require_skills(db: Session, skill_ids: List[int]) -> None:
    found = {s.id for s in skill_crud.get_skills_by_ids(db, skill_ids)}
    missing = sorted(set(skill_ids) - found)
    if missing:
        raise NotFound(f"Skill not found: {missing[0]}")


def serialize_profile(db: Session, profile: Profile) -> Dict:
    """Profile fields plus teach/learn skill summaries."""
    links = profile_crud.get_skill_links(db, profile.user_id)
    return {
        "user_id": profile.user_id,
        "name": profile.name,
        "email": profile.email,
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
        "availability_status": profile.availability_status,
        "credits": profile.credits,
        "teach_skills": links.get(TEACH, []),
        "learn_skills": links.get(LEARN, []),
    }


def public_user(profile: Optional[Profile]) -> Optional[Dict]:
    if profile is None:
        return None
    return {
        "user_id": profile.user_id,
        "name": profile.name,
        "avatar_url": profile.avatar_url,
    }


def get_profile_or_404(db: Session, user_id: int) -> Profile:
    profile = profile_crud.get_profile_by_user_id(db, user_id)
    if not profile:
        raise NotFound("Profile not found")
    return profile


def complete_profile_setup(
    db: Session,
    user: User,
    name: str,
    bio: Optional[str],
    teach_skill_ids: List[int],
    learn_skill_ids: List[int]
) -> Profile:
    """
    Create the caller's profile with the welcome balance and skill links.

    Args:
        db: Database session
        user: Authenticated user without a profile
        name: Display name
        bio: Optional bio
        teach_skill_ids: At least one skill the user can teach
        learn_skill_ids: At least one skill the user wants to learn

    Returns:
        Created Profile object (committed)

    Raises:
        ValidationFailed: Profile already exists or a skill list is empty
        NotFound: Unknown skill id
    """
    if profile_crud.get_profile_by_user_id(db, user.id):
        raise ValidationFailed("Profile already exists")
    if not teach_skill_ids:
        raise ValidationFailed("Select at least one skill to teach")
    if not learn_skill_ids:
        raise ValidationFailed("Select at least one skill to learn")

    _require_skills(db, list(teach_skill_ids) + list(learn_skill_ids))

    profile = profile_crud.create_profile(
        db,
        user=user,
        name=name,
        bio=bio,
        credits=CreditPolicy.WELCOME_BONUS,
    )
    credit_crud.create_transaction(
        db,
        user_id=user.id,
        amount=CreditPolicy.WELCOME_BONUS,
        transaction_type=TransactionType.WELCOME_BONUS,
        description="Welcome bonus",
    )

    for skill_id in dict.fromkeys(teach_skill_ids):
        profile_crud.add_skill_link(db, user.id, skill_id, TEACH)
    for skill_id in dict.fromkeys(learn_skill_ids):
        profile_crud.add_skill_link(db, user.id, skill_id, LEARN)

    db.commit()
    db.refresh(profile)
    logger.info("Profile set up for user %s with %s credits", user.id, profile.credits)
    return profile


def update_profile(
    db: Session,
    user_id: int,
    name: Optional[str] = None,
    bio: Optional[str] = None,
    availability_status: Optional[str] = None
) -> Profile:
    profile = get_profile_or_404(db, user_id)

    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationFailed("Name cannot be empty")
        profile.name = name
    if bio is not None:
        profile.bio = bio.strip() or None
    if availability_status is not None:
        profile.availability_status = availability_status

    db.commit()
    db.refresh(profile)
    return profile


def add_skill(db: Session, user_id: int, skill_id: int, skill_type: str) -> Profile:
    profile = get_profile_or_404(db, user_id)
    if not skill_crud.get_skill(db, skill_id):
        raise NotFound("Skill not found")
    if profile_crud.get_skill_link(db, user_id, skill_id, skill_type):
        raise ValidationFailed("Skill already added")

    profile_crud.add_skill_link(db, user_id, skill_id, skill_type)
    db.commit()
    return profile


def remove_skill(db: Session, user_id: int, skill_id: int, skill_type: str) -> Profile:
    """
    Raises:
        NotFound: The link does not exist
        ValidationFailed: Removing the last teach or learn skill
    """
    profile = get_profile_or_404(db, user_id)
    link = profile_crud.get_skill_link(db, user_id, skill_id, skill_type)
    if not link:
        raise NotFound("Skill link not found")
    if profile_crud.count_skill_links(db, user_id, skill_type) <= 1:
        raise ValidationFailed(f"At least one {skill_type} skill is required")

    db.delete(link)
    db.commit()
    return profile


def set_avatar_url(db: Session, user_id: int, avatar_url: Optional[str]) -> Profile:
    profile = get_profile_or_404(db, user_id)
    profile.avatar_url = avatar_url
    db.commit()
    db.refresh(profile)
    return profile
