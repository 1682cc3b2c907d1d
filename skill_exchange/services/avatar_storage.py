# skill_exchange/services/avatar_storage.py
"""
Public avatar bucket on local disk.

Objects live at ``<AVATAR_DIR>/<user_id>/<filename>`` and are served under
``AVATAR_PUBLIC_PREFIX``. Only the owner (first path segment) may write or
delete an object.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

from skill_exchange.config import settings
from skill_exchange.exceptions import NotAuthorized, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def bucket_root() -> Path:
    return Path(settings.AVATAR_DIR)


def object_path(user_id: int, filename: str) -> str:
    return f"{user_id}/{filename}"


def check_owner(path: str, user_id: int) -> PurePosixPath:
    """
    Validate an object path and that its first segment is the caller's id.

    Raises:
        ValidationFailed: Malformed path
        NotAuthorized: Path belongs to someone else
    """
    parts = PurePosixPath(path).parts
    if len(parts) != 2 or any(p in ("", ".", "..") for p in parts) or path.startswith("/"):
        raise ValidationFailed("Invalid avatar path")
    if parts[0] != str(user_id):
        raise NotAuthorized("You can only modify your own avatar")
    return PurePosixPath(*parts)


def public_url(path: str) -> str:
    return f"{settings.AVATAR_PUBLIC_PREFIX.rstrip('/')}/{path}"


def path_from_url(url: Optional[str]) -> Optional[str]:
    prefix = settings.AVATAR_PUBLIC_PREFIX.rstrip("/") + "/"
    if url and url.startswith(prefix):
        return url[len(prefix):]
    return None


def save_avatar(user_id: int, content: bytes, content_type: Optional[str]) -> str:
    """
    Store an uploaded avatar and return its public URL.

    Earlier uploads in another format are left in place; call
    ``prune_avatars`` once the profile points at the new URL.

    Raises:
        ValidationFailed: Unsupported content type, empty or oversized file
    """
    extension = ALLOWED_CONTENT_TYPES.get((content_type or "").lower())
    if extension is None:
        raise ValidationFailed("Avatar must be a PNG, JPEG, GIF or WebP image")
    if not content:
        raise ValidationFailed("Avatar file is empty")
    if len(content) > settings.AVATAR_MAX_BYTES:
        raise ValidationFailed(
            f"Avatar too large. Maximum size: {settings.AVATAR_MAX_BYTES // 1024}KB"
        )

    path = check_owner(object_path(user_id, f"avatar{extension}"), user_id)
    owner_dir = bucket_root() / path.parts[0]
    owner_dir.mkdir(parents=True, exist_ok=True)
    (owner_dir / path.name).write_bytes(content)
    logger.info("Stored avatar for user %s (%s bytes)", user_id, len(content))
    return public_url(str(path))


def prune_avatars(user_id: int, keep_url: Optional[str]) -> None:
    """Remove the user's avatar files other than the one ``keep_url`` names."""
    keep = path_from_url(keep_url)
    keep_name = check_owner(keep, user_id).name if keep else None
    owner_dir = bucket_root() / str(user_id)
    if not owner_dir.is_dir():
        return
    for stale in owner_dir.glob("avatar.*"):
        if stale.name != keep_name:
            stale.unlink()
            logger.info("Removed stale avatar %s/%s", user_id, stale.name)


def resolve_avatar(user_id: int, path: str) -> Path:
    """
    Raises:
        NotAuthorized: Path belongs to someone else
        NotFound: Object does not exist
    """
    checked = check_owner(path, user_id)
    target = bucket_root().joinpath(*checked.parts)
    if not target.is_file():
        raise NotFound("Avatar not found")
    return target
