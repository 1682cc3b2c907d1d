from typing import List, Optional

from sqlalchemy.orm import Session

from skill_exchange.models.skill import Skill


def get_skill(db: Session, skill_id: int) -> Optional[Skill]:
    return db.query(Skill).filter(Skill.id == skill_id).first()


def get_skill_by_name(db: Session, name: str) -> Optional[Skill]:
    return db.query(Skill).filter(Skill.name == name).first()


def get_skills_by_ids(db: Session, skill_ids: List[int]) -> List[Skill]:
    if not skill_ids:
        return []
    return db.query(Skill).filter(Skill.id.in_(set(skill_ids))).all()


def list_skills(db: Session, category: Optional[str] = None) -> List[Skill]:
    query = db.query(Skill)
    if category:
        query = query.filter(Skill.category == category)
    return query.order_by(Skill.name).all()


def create_skill(db: Session, name: str, category: Optional[str] = None) -> Skill:
    skill = Skill(name=name, category=category)
    db.add(skill)
    db.flush()
    return skill
