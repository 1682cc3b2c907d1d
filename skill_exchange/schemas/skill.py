from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional

# ======================
# SKILL SCHEMAS
# ======================

class SkillSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class Skill(SkillSummary):
    category: Optional[str] = None


# ======================
# USER_SKILL SCHEMAS
# ======================

class SkillLinkCreate(BaseModel):
    skill_id: int
    skill_type: Literal["teach", "learn"]
