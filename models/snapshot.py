from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional

from .member import Member
from .round import Round
from .settings import SeasonSettings


class LeagueSnapshot(BaseModel):
    """Immutable full read of the league: the only input the engine takes."""
    model_config = ConfigDict(frozen=True)

    members: List[Member] = Field(default_factory=list)
    rounds: List[Round] = Field(default_factory=list)
    settings: SeasonSettings = Field(default_factory=SeasonSettings)

    @field_validator('rounds')
    @classmethod
    def sort_rounds_by_date(cls, v):
        # Engine derivations assume chronological input.
        return sorted(v, key=lambda r: (r.date, r.id if r.id is not None else 0))

    def get_member(self, member_id: int) -> Optional[Member]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def get_round(self, round_id: int) -> Optional[Round]:
        for round_ in self.rounds:
            if round_.id == round_id:
                return round_
        return None

    def member_names(self) -> Dict[int, str]:
        return {m.id: m.name for m in self.members if m.id is not None}

    def member_ids(self) -> List[int]:
        return [m.id for m in self.members if m.id is not None]

    @property
    def active_members(self) -> List[Member]:
        return [m for m in self.members if m.active]

    def next_round_id(self) -> int:
        ids = [r.id for r in self.rounds if r.id is not None]
        return max(ids, default=0) + 1

    def next_member_id(self) -> int:
        ids = self.member_ids()
        return max(ids, default=0) + 1
