import datetime as dt
from enum import Enum
from pydantic import Field, field_validator, model_validator
from typing import List, Optional

from .base import BaseLeagueModel


class AwardType(str, Enum):
    """Standard award names. Award.award_type also accepts free text."""
    LONGEST_DRIVE = "longest_drive"
    NEAREST_PIN = "nearest_pin"
    EAGLE = "eagle"
    LUCKY_DRAW = "lucky_draw"
    CART_FIRST = "cart_first"
    CART_SECOND = "cart_second"
    MOST_IMPROVED = "most_improved"
    HANDICAP_IMPROVED = "handicap_improved"
    OTHER = "other"


class Score(BaseLeagueModel):
    """One member's stroke count for a round."""
    member_id: int
    strokes: int = Field(..., ge=1)


class Award(BaseLeagueModel):
    """A prize handed out at a round. Winners are unique per round."""
    award_type: str = Field(..., min_length=1)
    winner_name: str = Field(..., min_length=1)


class Expense(BaseLeagueModel):
    """A single expense line item attached to a round."""
    id: Optional[int] = None
    category: str = Field(..., min_length=1)
    item_name: str = ""
    amount: int = Field(..., ge=0)


def _unique(ids: List[int]) -> List[int]:
    seen = set()
    result = []
    for member_id in ids:
        if member_id not in seen:
            seen.add(member_id)
            result.append(member_id)
    return result


class Round(BaseLeagueModel):
    """A scored league event. Immutable after save except for expenses."""
    id: Optional[int] = None
    date: dt.date
    course: str = ""
    attendees: List[int] = Field(default_factory=list)
    scores: List[Score] = Field(default_factory=list)
    cart_teams: List[List[int]] = Field(default_factory=list)
    awards: List[Award] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)

    @field_validator('attendees')
    @classmethod
    def dedupe_attendees(cls, v):
        return _unique(v)

    @model_validator(mode='after')
    def validate_scores_and_awards(self):
        attendees = set(self.attendees)
        seen = set()
        for score in self.scores:
            if score.member_id not in attendees:
                raise ValueError(f"Member {score.member_id} has a score but did not attend")
            if score.member_id in seen:
                raise ValueError(f"Member {score.member_id} has more than one score")
            seen.add(score.member_id)

        winners = [a.winner_name for a in self.awards]
        if len(winners) != len(set(winners)):
            raise ValueError("Award winners must be unique within a round")
        return self

    @property
    def month(self) -> int:
        return self.date.month

    def has_scores(self) -> bool:
        return bool(self.scores)

    def get_score(self, member_id: int) -> Optional[Score]:
        """Get the score recorded for a member, if any."""
        for score in self.scores:
            if score.member_id == member_id:
                return score
        return None

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def expense_total(self) -> int:
        return sum(e.amount for e in self.expenses)


class RoundSubmission(BaseLeagueModel):
    """Everything a single round save writes, in one payload."""
    date: dt.date
    course: str = ""
    attendees: List[int] = Field(..., min_length=1)
    scores: List[Score] = Field(default_factory=list)
    cart_teams: List[List[int]] = Field(default_factory=list)
    awards: List[Award] = Field(default_factory=list)
    worst_scorer: Optional[Score] = None

    def to_round(self, round_id: Optional[int] = None) -> Round:
        return Round(
            id=round_id,
            date=self.date,
            course=self.course,
            attendees=self.attendees,
            scores=self.scores,
            cart_teams=self.cart_teams,
            awards=self.awards,
        )
