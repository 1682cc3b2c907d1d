# skill_exchange/crud/profile.py
"""
Profile CRUD Operations

Database operations for auth users, public profiles and the teach/learn
skill junction rows.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from skill_exchange.models.skill import Skill, UserSkill, TEACH, LEARN
from skill_exchange.models.user import User, Profile


# ======================
# USER CRUD
# ======================

def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, email: str, password_hash: str, role: str = "member") -> User:
    """
    Create an auth identity. The public profile is created later by setup.

    Args:
        db: Database session
        email: Login email (stored lower-cased)
        password_hash: bcrypt hash
        role: "member" or "admin"

    Returns:
        Created User object (flushed, not committed)
    """
    user = User(email=email.lower(), password_hash=password_hash, role=role)
    db.add(user)
    db.flush()
    return user


# ======================
# PROFILE CRUD
# ======================

def get_profile_by_user_id(
    db: Session,
    user_id: int,
    for_update: bool = False
) -> Optional[Profile]:
    """
    Retrieve a user's profile.

    Args:
        db: Database session
        user_id: Owner user ID
        for_update: Lock the row until the surrounding transaction ends

    Returns:
        Profile object or None if the user has not completed setup
    """
    query = db.query(Profile).filter(Profile.user_id == user_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def lock_profiles(db: Session, user_ids: List[int]) -> List[Profile]:
    """
    Lock several profiles with one query, in ascending user id order.

    Writers touching more than one profile row must lock through here.
    """
    ids = sorted({uid for uid in user_ids if uid is not None})
    if not ids:
        return []
    return (
        db.query(Profile)
        .filter(Profile.user_id.in_(ids))
        .order_by(Profile.user_id)
        .with_for_update()
        .populate_existing()
        .all()
    )


def get_profiles_by_user_ids(db: Session, user_ids: List[int]) -> Dict[int, Profile]:
    """Map user id to profile for a batch of ids."""
    ids = {uid for uid in user_ids if uid is not None}
    if not ids:
        return {}
    rows = db.query(Profile).filter(Profile.user_id.in_(ids)).all()
    return {p.user_id: p for p in rows}


def find_profile_by_name(db: Session, name: str) -> Optional[Profile]:
    """Case-insensitive exact name match."""
    return (
        db.query(Profile)
        .filter(func.lower(Profile.name) == name.strip().lower())
        .order_by(Profile.id)
        .first()
    )


def create_profile(
    db: Session,
    user: User,
    name: str,
    bio: Optional[str],
    credits: Decimal
) -> Profile:
    profile = Profile(
        user_id=user.id,
        name=name,
        email=user.email,
        bio=bio,
        credits=credits,
    )
    db.add(profile)
    db.flush()
    return profile


# ======================
# SKILL LINK CRUD
# ======================

def get_skill_links(db: Session, user_id: int) -> Dict[str, List[Skill]]:
    """
    Return the user's skills split into teach and learn lists, ordered by name.
    """
    rows = (
        db.query(UserSkill.skill_type, Skill)
        .join(Skill, Skill.id == UserSkill.skill_id)
        .filter(UserSkill.user_id == user_id)
        .order_by(Skill.name)
        .all()
    )
    links = {TEACH: [], LEARN: []}
    for skill_type, skill in rows:
        links.setdefault(skill_type, []).append(skill)
    return links


def get_skill_link(
    db: Session,
    user_id: int,
    skill_id: int,
    skill_type: str
) -> Optional[UserSkill]:
    return db.query(UserSkill).filter(
        UserSkill.user_id == user_id,
        UserSkill.skill_id == skill_id,
        UserSkill.skill_type == skill_type,
    ).first()


def add_skill_link(db: Session, user_id: int, skill_id: int, skill_type: str) -> UserSkill:
    link = UserSkill(user_id=user_id, skill_id=skill_id, skill_type=skill_type)
    db.add(link)
    db.flush()
    return link


def count_skill_links(db: Session, user_id: int, skill_type: str) -> int:
    return db.query(func.count(UserSkill.id)).filter(
        UserSkill.user_id == user_id,
        UserSkill.skill_type == skill_type,
    ).scalar() or 0
