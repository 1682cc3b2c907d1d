# skill_exchange/services/tutor_service.py
"""
Tutor discovery: every profile that teaches at least one skill, with its
average received rating and number of completed sessions as tutor.
"""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import review as review_crud
from skill_exchange.crud import session as session_crud
from skill_exchange.exceptions import NotFound
from skill_exchange.models.skill import TEACH, LEARN, UserSkill
from skill_exchange.models.user import Profile


def _tutor_card(db: Session, profile: Profile, links: Optional[Dict] = None) -> Dict:
    if links is None:
        links = profile_crud.get_skill_links(db, profile.user_id)
    return {
        "user_id": profile.user_id,
        "name": profile.name,
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
        "availability_status": profile.availability_status,
        "credits": profile.credits,
        "teach_skills": links.get(TEACH, []),
        "learn_skills": links.get(LEARN, []),
        "rating": review_crud.average_rating(db, profile.user_id),
        "session_count": session_crud.count_completed_as_tutor(db, profile.user_id),
    }


def _matches(query: str, profile: Profile, links: Dict) -> bool:
    if query in (profile.name or "").lower():
        return True
    for skill in links.get(TEACH, []) + links.get(LEARN, []):
        if query in skill.name.lower():
            return True
    return False


def search_tutors(db: Session, user_id: int, query: Optional[str] = None) -> List[Dict]:
    """
    Profiles other than the caller's that teach something, optionally
    filtered by a case-insensitive match on name or skill names.
    """
    teachers = (
        db.query(Profile)
        .join(UserSkill, UserSkill.user_id == Profile.user_id)
        .filter(UserSkill.skill_type == TEACH, Profile.user_id != user_id)
        .distinct()
        .order_by(Profile.name, Profile.user_id)
        .all()
    )

    needle = (query or "").strip().lower()
    results = []
    for profile in teachers:
        links = profile_crud.get_skill_links(db, profile.user_id)
        if needle and not _matches(needle, profile, links):
            continue
        results.append(_tutor_card(db, profile, links))
    return results


def get_tutor_profile(db: Session, identifier: str) -> Dict:
    """Look up by user id, falling back to a case-insensitive name match."""
    profile = None
    if identifier.isdecimal():
        profile = profile_crud.get_profile_by_user_id(db, int(identifier))
    if profile is None:
        profile = profile_crud.find_profile_by_name(db, identifier)
    if profile is None:
        raise NotFound("Tutor not found")
    return _tutor_card(db, profile)
