"""
Insert the default skill catalogue. Safe to run repeatedly.

Usage:
    python -m skill_exchange.scripts.seed_skills
"""

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skill_exchange.crud import skill as skill_crud
from skill_exchange.database import Base, SessionLocal, engine

logger = logging.getLogger(__name__)

DEFAULT_SKILLS = {
    "Programming": ["Python", "JavaScript", "TypeScript", "React", "SQL", "Java", "Go"],
    "Data": ["Data Analysis", "Machine Learning", "Statistics", "Excel"],
    "Design": ["UI Design", "Graphic Design", "Figma", "Photography"],
    "Languages": ["English", "Spanish", "French", "German", "Japanese", "Mandarin"],
    "Music": ["Guitar", "Piano", "Singing", "Music Theory"],
    "Business": ["Marketing", "Public Speaking", "Project Management", "Writing"],
    "Lifestyle": ["Cooking", "Yoga", "Fitness", "Chess"],
}


def seed_skills(db: Session) -> int:
    """Create missing catalogue entries; returns how many were added."""
    created = 0
    for category, names in DEFAULT_SKILLS.items():
        for name in names:
            if skill_crud.get_skill_by_name(db, name):
                continue
            skill_crud.create_skill(db, name=name, category=category)
            created += 1
    db.commit()
    return created


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_skills(db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Skill seeding failed")
        return 1
    finally:
        db.close()
    logger.info("Seeded %s new skills", created)
    return 0


if __name__ == "__main__":
    sys.exit(main())
