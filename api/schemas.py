"""API request bodies and composite responses."""

import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Optional

from models import Round
from models.views import (
    AwardRecommendation,
    RankedScore,
    RoundExpenseSummary,
)


class CreateMemberRequest(BaseModel):
    name: str
    target_score: Optional[int] = None


class UpdateMemberRequest(BaseModel):
    """Partial update. Only fields present in the body are applied."""
    name: Optional[str] = None
    target_score: Optional[int] = None
    next_target: Optional[int] = None
    active: Optional[bool] = None
    dues_paid: Optional[bool] = None
    goal_achieved: Optional[bool] = None


class ScoreEntry(BaseModel):
    member_id: int
    strokes: int


class AwardEntry(BaseModel):
    award_type: str
    winner_name: str


class RoundDraftRequest(BaseModel):
    """The admin's round draft as sent by the client."""
    date: Optional[dt.date] = None
    course: Optional[str] = None
    attendees: List[int] = Field(default_factory=list)
    scores: List[ScoreEntry] = Field(default_factory=list)
    cart_teams: List[List[int]] = Field(default_factory=list)
    awards: List[AwardEntry] = Field(default_factory=list)


class CartTeamsResponse(BaseModel):
    cart_teams: List[List[int]]
    cart_averages: List[Optional[float]]


class RoundPreviewResponse(BaseModel):
    """Live ranking and hat preview for a draft that has not been saved."""
    ranks: List[RankedScore]
    worst_scorer_id: Optional[int] = None
    recommendations: List[AwardRecommendation] = Field(default_factory=list)


class RoundDetailResponse(BaseModel):
    round: Round
    ranks: List[RankedScore]
    expenses: RoundExpenseSummary


class CreateExpenseRequest(BaseModel):
    category: str
    item_name: str = ""
    amount: int


