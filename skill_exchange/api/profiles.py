# skill_exchange/api/profiles.py
"""
Profile API Router

Endpoints:
- POST /profiles/setup - Complete profile setup (welcome credits + skills)
- GET /profiles/me - Current user's profile
- PATCH /profiles/me - Update name, bio, availability
- POST /profiles/me/skills - Add a teach/learn skill
- DELETE /profiles/me/skills/{skill_type}/{skill_id} - Remove a skill link
- POST /profiles/me/avatar - Upload avatar image
- DELETE /profiles/me/avatar - Remove avatar image
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from skill_exchange.api.errors import service_errors
from skill_exchange.config import settings
from skill_exchange.database import get_db
from skill_exchange.models.user import User
from skill_exchange.schemas.profile import ProfileResponse, ProfileSetup, ProfileUpdate
from skill_exchange.schemas.skill import SkillLinkCreate
from skill_exchange.services import avatar_storage, profile_service
from skill_exchange.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


# ======================
# PROFILE SETUP
# ======================
@router.post("/setup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def complete_profile_setup(
    payload: ProfileSetup,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create the caller's public profile.

    Grants the welcome credits and links at least one skill to teach and
    one skill to learn.
    """
    with service_errors(db, "completing profile setup"):
        profile = profile_service.complete_profile_setup(
            db,
            user=current_user,
            name=payload.name,
            bio=payload.bio,
            teach_skill_ids=payload.teach_skill_ids,
            learn_skill_ids=payload.learn_skill_ids,
        )
        return profile_service.serialize_profile(db, profile)


# ======================
# MY PROFILE
# ======================
@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "loading profile"):
        profile = profile_service.get_profile_or_404(db, current_user.id)
        return profile_service.serialize_profile(db, profile)


@router.patch("/me", response_model=ProfileResponse)
def update_my_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "updating profile"):
        profile = profile_service.update_profile(
            db,
            current_user.id,
            name=payload.name,
            bio=payload.bio,
            availability_status=payload.availability_status,
        )
        return profile_service.serialize_profile(db, profile)


# ======================
# SKILL LINKS
# ======================
@router.post("/me/skills", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def add_my_skill(
    payload: SkillLinkCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "adding skill"):
        profile = profile_service.add_skill(db, current_user.id, payload.skill_id, payload.skill_type)
        return profile_service.serialize_profile(db, profile)


@router.delete("/me/skills/{skill_type}/{skill_id}", response_model=ProfileResponse)
def remove_my_skill(
    skill_type: Literal["teach", "learn"],
    skill_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "removing skill"):
        profile = profile_service.remove_skill(db, current_user.id, skill_id, skill_type)
        return profile_service.serialize_profile(db, profile)


# ======================
# AVATAR
# ======================
@router.post("/me/avatar", response_model=ProfileResponse)
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upload a PNG/JPEG/GIF/WebP avatar and point the profile at it."""
    content = await file.read(settings.AVATAR_MAX_BYTES + 1)

    with service_errors(db, "uploading avatar"):
        profile_service.get_profile_or_404(db, current_user.id)
        try:
            url = avatar_storage.save_avatar(current_user.id, content, file.content_type)
        except OSError:
            logger.exception("Avatar write failed for user %s", current_user.id)
            raise HTTPException(status_code=500, detail="Could not store avatar")
        profile = profile_service.set_avatar_url(db, current_user.id, url)

    # Older files go only once the profile points at the new one.
    _prune_avatars(current_user.id, url)
    return profile_service.serialize_profile(db, profile)


@router.delete("/me/avatar", response_model=ProfileResponse)
def delete_my_avatar(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    with service_errors(db, "deleting avatar"):
        profile = profile_service.get_profile_or_404(db, current_user.id)
        path = avatar_storage.path_from_url(profile.avatar_url)
        if path is None:
            raise HTTPException(status_code=404, detail="No avatar to delete")
        avatar_storage.resolve_avatar(current_user.id, path)
        profile = profile_service.set_avatar_url(db, current_user.id, None)

    _prune_avatars(current_user.id, None)
    return profile_service.serialize_profile(db, profile)


def _prune_avatars(user_id: int, keep_url):
    try:
        avatar_storage.prune_avatars(user_id, keep_url)
    except OSError:
        logger.exception("Stale avatar cleanup failed for user %s", user_id)
