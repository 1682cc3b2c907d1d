"""Pytest bootstrap: environment, project imports and shared fixtures."""

import itertools
import os
import sys
import tempfile
from pathlib import Path

# Settings are read at import time, so configure them before any package import.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AVATAR_DIR"] = tempfile.mkdtemp(prefix="skill-exchange-avatars-")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Ensure project root is on sys.path so `import skill_exchange` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest

# Skip suite when FastAPI dependency is not present in local environment.
pytest.importorskip("fastapi")

from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from skill_exchange.database import Base
from skill_exchange.models.skill import Skill
from skill_exchange.models.user import User
from skill_exchange.services import profile_service


@pytest.fixture
def db_session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def skills(db_session):
    catalogue = {
        "python": Skill(name="Python", category="Programming"),
        "guitar": Skill(name="Guitar", category="Music"),
        "spanish": Skill(name="Spanish", category="Languages"),
        "cooking": Skill(name="Cooking", category="Lifestyle"),
    }
    db_session.add_all(catalogue.values())
    db_session.commit()
    return catalogue


@pytest.fixture
def make_user(db_session):
    """Auth identity without a profile."""
    counter = itertools.count(1)

    def _make(email=None, role="member"):
        user = User(
            email=email or f"user{next(counter)}@example.com",
            password_hash="hash",
            role=role,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_member(db_session, skills, make_user):
    """User who completed profile setup (3 welcome credits)."""

    def _make(name, teach=("python",), learn=("guitar",)):
        user = make_user(email=f"{name.lower().replace(' ', '.')}@example.com")
        profile_service.complete_profile_setup(
            db_session,
            user=user,
            name=name,
            bio=None,
            teach_skill_ids=[skills[key].id for key in teach],
            learn_skill_ids=[skills[key].id for key in learn],
        )
        return user

    return _make


@pytest.fixture
def set_credits(db_session):
    """Force a stored balance (bypasses the ledger on purpose)."""

    def _set(user, amount):
        user.profile.credits = Decimal(str(amount))
        db_session.commit()

    return _set
