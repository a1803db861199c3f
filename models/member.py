from pydantic import ConfigDict, Field, field_validator
from typing import Optional

from .base import BaseLeagueModel
from .rules import DEFAULT_TARGET_SCORE


class Member(BaseLeagueModel):
    """A league member. Never hard-deleted, only deactivated."""
    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    target_score: int = Field(DEFAULT_TARGET_SCORE, gt=0)
    next_target: Optional[int] = Field(None, gt=0)
    active: bool = True
    dues_paid: bool = False
    goal_achieved: bool = False  # admin-toggled, never derived from scores

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Member name cannot be blank")
        return v


class MemberUpdate(BaseLeagueModel):
    """Partial update applied by an admin. Unset fields are left alone."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    target_score: Optional[int] = Field(None, gt=0)
    next_target: Optional[int] = Field(None, gt=0)
    active: Optional[bool] = None
    dues_paid: Optional[bool] = None
    goal_achieved: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
