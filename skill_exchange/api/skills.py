from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skill_exchange.crud import skill as skill_crud
from skill_exchange.database import get_db
from skill_exchange.schemas.skill import Skill

router = APIRouter(prefix="/skills", tags=["Skills"])


# ======================
# GET: Skill catalogue
# ======================
@router.get("/", response_model=List[Skill])
def list_skills(
    category: Optional[str] = Query(None, description="Only skills in this category"),
    db: Session = Depends(get_db)
):
    """Seeded catalogue, ordered by name. Public, read-only."""
    return skill_crud.list_skills(db, category=category)
