"""Derived, never-persisted views recomputed from members and rounds."""

import datetime as dt
from enum import Enum
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Set


class RankedScore(BaseModel):
    """A score with its finishing position and championship points."""
    member_id: int
    strokes: int
    rank: int
    points: int


class MemberStats(BaseModel):
    member_id: int
    average: Optional[float] = None
    rounds_played: int = 0
    scores: List[int] = Field(default_factory=list)
    best_score: Optional[int] = None


class StandingsEntry(BaseModel):
    """One round's contribution to a member's standings."""
    round_id: Optional[int] = None
    date: dt.date
    rank: int
    points: int
    score: int


class StandingsRow(BaseModel):
    member_id: int
    total_points: int = 0
    rounds_counted: int = 0
    wins: int = 0
    podiums: int = 0
    history: List[StandingsEntry] = Field(default_factory=list)


class AttendanceRow(BaseModel):
    member_id: int
    months_present: Set[int] = Field(default_factory=set)
    rounds_attended: int = 0
    active_months_present: int = 0
    compliant: bool = False


class HatEvent(BaseModel):
    round_id: Optional[int] = None
    date: dt.date
    holder_id: int
    score: int


class HatCount(BaseModel):
    member_id: int
    times_held: int


class AwardRecommendation(BaseModel):
    """Advisory award pick. An admin turns it into a real Award."""
    award_type: str
    member_id: int
    winner_name: str
    margin: Optional[float] = None


class ExpenseStatus(str, Enum):
    ADEQUATE = "adequate"
    INSUFFICIENT = "insufficient"
    EXCESSIVE = "excessive"
    NOT_APPLICABLE = "n/a"


class RoundExpenseSummary(BaseModel):
    round_id: Optional[int] = None
    date: Optional[dt.date] = None
    total: int = 0
    attendee_count: int
    per_person: int = 0
    status: ExpenseStatus = ExpenseStatus.NOT_APPLICABLE


class SeasonExpenseSummary(BaseModel):
    total: int = 0
    rounds_with_expenses: int = 0
    average_per_round: Optional[float] = None
    by_category: Dict[str, int] = Field(default_factory=dict)
    rounds: List[RoundExpenseSummary] = Field(default_factory=list)


class DuesRow(BaseModel):
    member_id: int
    name: str
    target_score: int
    best_score: Optional[int] = None
    target_met: bool = False  # informational only
    dues_paid: bool = False
    goal_achieved: bool = False


class DuesSummary(BaseModel):
    dues_per_member: int
    goal_refund: int
    total_collected: int = 0
    total_refunded: int = 0
    rows: List[DuesRow] = Field(default_factory=list)


class HatStatus(BaseModel):
    holder_id: Optional[int] = None
    since: Optional[dt.date] = None
    days_held: int = 0
    history: List[HatEvent] = Field(default_factory=list)
    counts: List[HatCount] = Field(default_factory=list)


class SeasonReport(BaseModel):
    """Every derived view for one snapshot."""
    season_year: int
    rounds_scored: int = 0
    stats: Dict[int, MemberStats] = Field(default_factory=dict)
    standings: List[StandingsRow] = Field(default_factory=list)
    attendance: List[AttendanceRow] = Field(default_factory=list)
    hat: HatStatus = Field(default_factory=HatStatus)
    expenses: SeasonExpenseSummary = Field(default_factory=SeasonExpenseSummary)
    dues: Optional[DuesSummary] = None
