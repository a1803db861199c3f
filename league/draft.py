"""The admin's in-progress round: attendees, carts, scores, awards.

A draft lives only in memory. A failed save leaves it untouched so the
admin can retry; reset() is called after a successful save.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Mapping, Optional, Sequence, Set

from engine.awards import ChoiceSource, recommend_awards
from engine.carts import balance_carts, group_average
from engine.hat import worst_scorer
from engine.points import rank_scores
from models.round import Award, Round, RoundSubmission, Score
from models.rules import CART_SIZE, DEFAULT_CART_AVERAGE, DEFAULT_COURSE
from models.views import AwardRecommendation, RankedScore

from .exceptions import (
    DuplicateAwardWinnerError,
    EmptyAttendeesError,
    InvalidStrokeCountError,
    MissingRoundDateError,
    NotAnAttendeeError,
    UnknownAwardWinnerError,
)


class RoundDraft:
    """Three-step round builder: select attendees, enter scores, record awards."""

    def __init__(self, course: str = DEFAULT_COURSE, date: Optional[dt.date] = None):
        self._default_course = course
        self.reset()
        self.date = date

    # ================================================================
    # Step 1: attendees and carts
    # ================================================================

    def toggle_attendee(self, member_id: int) -> bool:
        """Select or deselect a member. Returns True if now selected."""
        if member_id in self.attendees:
            self.attendees = [m for m in self.attendees if m != member_id]
            return False
        self.attendees = [*self.attendees, member_id]
        return True

    def set_attendees(self, member_ids: Sequence[int]) -> None:
        self.attendees = list(dict.fromkeys(member_ids))

    def make_cart_teams(
        self,
        averages: Mapping[int, Optional[float]],
        *,
        cart_size: int = CART_SIZE,
        default_average: float = DEFAULT_CART_AVERAGE,
    ) -> List[List[int]]:
        """Balance carts from current averages. Needs at least one full cart of players."""
        if len(self.attendees) < cart_size:
            return self.cart_teams
        self.cart_teams = balance_carts(
            self.attendees, averages, cart_size=cart_size, default_average=default_average
        )
        return self.cart_teams

    def cart_averages(
        self,
        averages: Mapping[int, Optional[float]],
        default_average: float = DEFAULT_CART_AVERAGE,
    ) -> List[Optional[float]]:
        return [group_average(cart, averages, default_average) for cart in self.cart_teams]

    # ================================================================
    # Step 2: scores
    # ================================================================

    def set_score(self, member_id: int, strokes) -> None:
        if member_id not in self.attendees:
            raise NotAnAttendeeError(member_id)
        if isinstance(strokes, bool) or not isinstance(strokes, int) or strokes <= 0:
            raise InvalidStrokeCountError(member_id, strokes)
        self._strokes[member_id] = strokes

    def clear_score(self, member_id: int) -> None:
        self._strokes.pop(member_id, None)

    @property
    def scores(self) -> List[Score]:
        """Entered scores of still-selected attendees, in entry order."""
        selected = set(self.attendees)
        return [
            Score(member_id=member_id, strokes=strokes)
            for member_id, strokes in self._strokes.items()
            if member_id in selected
        ]

    def rank_preview(self, points_table: Optional[Mapping[int, int]] = None) -> List[RankedScore]:
        return rank_scores(self.scores, points_table)

    def worst_scorer(self) -> Optional[Score]:
        return worst_scorer(self.scores)

    # ================================================================
    # Step 3: awards
    # ================================================================

    @property
    def awarded_names(self) -> Set[str]:
        return {a.winner_name for a in self.awards}

    def add_award(self, award_type: str, winner_name: str, names: Mapping[int, str]) -> Award:
        """Record an award. Rejects non-attendees and second awards to the same winner."""
        winner_name = winner_name.strip()
        attendee_names = {names.get(m) for m in self.attendees}
        if winner_name not in attendee_names:
            raise UnknownAwardWinnerError(winner_name)
        if winner_name in self.awarded_names:
            raise DuplicateAwardWinnerError(winner_name)
        award = Award(award_type=award_type, winner_name=winner_name)
        self.awards = [*self.awards, award]
        return award

    def remove_award(self, index: int) -> None:
        self.awards = [a for i, a in enumerate(self.awards) if i != index]

    def recommendations(
        self,
        averages: Mapping[int, Optional[float]],
        history: Sequence[Round],
        names: Mapping[int, str],
        rng: Optional[ChoiceSource] = None,
    ) -> List[AwardRecommendation]:
        return recommend_awards(
            self.rank_preview(), averages, history, names, self.awarded_names, rng
        )

    # ================================================================
    # Save
    # ================================================================

    def validate(self, names: Optional[Mapping[int, str]] = None) -> None:
        """Raise the first validation error, if any. Never mutates the draft."""
        if self.date is None:
            raise MissingRoundDateError()
        if not self.attendees:
            raise EmptyAttendeesError()

        seen: Set[str] = set()
        attendee_names = {names.get(m) for m in self.attendees} if names is not None else None
        for award in self.awards:
            if award.winner_name in seen:
                raise DuplicateAwardWinnerError(award.winner_name)
            if attendee_names is not None and award.winner_name not in attendee_names:
                raise UnknownAwardWinnerError(award.winner_name)
            seen.add(award.winner_name)

    def to_submission(self, names: Optional[Mapping[int, str]] = None) -> RoundSubmission:
        self.validate(names)
        return RoundSubmission(
            date=self.date,
            course=self.course,
            attendees=self.attendees,
            scores=self.scores,
            cart_teams=self.cart_teams,
            awards=self.awards,
            worst_scorer=self.worst_scorer(),
        )

    def reset(self) -> None:
        self.date: Optional[dt.date] = None
        self.course = self._default_course
        self.attendees: List[int] = []
        self.cart_teams: List[List[int]] = []
        self.awards: List[Award] = []
        self._strokes: Dict[int, int] = {}
