"""
One-time creation of the first admin account (credit top-up operator).

Required environment:
    ENABLE_ADMIN_BOOTSTRAP=true
    ADMIN_BOOTSTRAP_CONFIRM=CREATE-FIRST-ADMIN
    ADMIN_NAME, ADMIN_EMAIL, ADMIN_PASSWORD

Usage:
    python -m skill_exchange.scripts.bootstrap_admin
"""

import os
import re
import sys
from decimal import Decimal
from typing import Optional

from skill_exchange.crud import profile as profile_crud
from skill_exchange.database import SessionLocal
from skill_exchange.models.user import User
from skill_exchange.utils.security import get_password_hash


CONFIRM_PHRASE = "CREATE-FIRST-ADMIN"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _required_env(key: str) -> str:
    value = os.getenv(key, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def _validate_password(password: str) -> None:
    if len(password) < 8:
        raise ValueError("ADMIN_PASSWORD must be at least 8 characters.")
    if len(password.encode("utf-8")) > 72:
        raise ValueError("ADMIN_PASSWORD must be <= 72 bytes (bcrypt limit).")
    if not (re.search(r"[A-Za-z]", password) and re.search(r"\d", password)):
        raise ValueError("ADMIN_PASSWORD must contain letters and digits.")


def bootstrap_admin() -> int:
    try:
        if not _is_truthy(os.getenv("ENABLE_ADMIN_BOOTSTRAP")):
            raise ValueError("Bootstrap disabled. Set ENABLE_ADMIN_BOOTSTRAP=true to run.")
        if _required_env("ADMIN_BOOTSTRAP_CONFIRM") != CONFIRM_PHRASE:
            raise ValueError(
                f"Invalid ADMIN_BOOTSTRAP_CONFIRM. Expected exact phrase: {CONFIRM_PHRASE}"
            )

        name = _required_env("ADMIN_NAME")
        email = _required_env("ADMIN_EMAIL").lower()
        password = _required_env("ADMIN_PASSWORD")
        if not EMAIL_RE.match(email):
            raise ValueError("ADMIN_EMAIL is not a valid email format.")
        _validate_password(password)

        db = SessionLocal()
        try:
            if db.query(User).filter(User.role == "admin").count() > 0:
                raise ValueError("Admin bootstrap blocked: an admin already exists.")
            if profile_crud.get_user_by_email(db, email):
                raise ValueError("ADMIN_EMAIL is already registered.")

            user = profile_crud.create_user(
                db, email=email, password_hash=get_password_hash(password), role="admin"
            )
            # Operators hold no credits, so their ledger stays empty.
            profile_crud.create_profile(db, user=user, name=name, bio=None, credits=Decimal("0"))
            db.commit()
            print(f"Admin created successfully: {email}")
            return 0
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    except Exception as exc:
        print(f"Admin bootstrap failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(bootstrap_admin())
