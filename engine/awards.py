"""
Advisory award picks for a round being built.

Three independent recommendations, each omitted when nobody qualifies:
- most improved: largest drop below the member's own season average
- handicap improved: largest drop below the member's first recorded score
- lucky draw: random pick outside the podium and outside existing winners
"""

from __future__ import annotations

import random
from typing import Collection, Dict, List, Mapping, Optional, Protocol, Sequence, TypeVar

from models.round import AwardType, Round
from models.views import AwardRecommendation, RankedScore

from .stats import round_half_up

T = TypeVar("T")

PODIUM_SIZE = 3


class ChoiceSource(Protocol):
    """Anything with random.Random's choice(); injected so tests can pin draws."""

    def choice(self, seq: Sequence[T]) -> T:
        ...


def first_recorded_scores(rounds: Sequence[Round]) -> Dict[int, int]:
    """member_id -> strokes from the earliest round (input order) they scored in."""
    first: Dict[int, int] = {}
    for round_obj in rounds:
        for score in round_obj.scores:
            first.setdefault(score.member_id, score.strokes)
    return first


def _best_gain(
    ranked: Sequence[RankedScore], baseline: Mapping[int, Optional[float]]
) -> Optional[tuple]:
    best = None
    for row in ranked:
        reference = baseline.get(row.member_id)
        if reference is None:
            continue
        gain = reference - row.strokes
        if gain > 0 and (best is None or gain > best[1]):
            best = (row, gain)
    return best


def _recommend(award_type: AwardType, row: RankedScore, names: Mapping[int, str], margin) -> AwardRecommendation:
    return AwardRecommendation(
        award_type=award_type.value,
        member_id=row.member_id,
        winner_name=names.get(row.member_id, str(row.member_id)),
        margin=round_half_up(margin, 1) if margin is not None else None,
    )


def most_improved(
    ranked: Sequence[RankedScore],
    averages: Mapping[int, Optional[float]],
    names: Mapping[int, str],
) -> Optional[AwardRecommendation]:
    best = _best_gain(ranked, averages)
    if best is None:
        return None
    return _recommend(AwardType.MOST_IMPROVED, best[0], names, best[1])


def handicap_improved(
    ranked: Sequence[RankedScore],
    history: Sequence[Round],
    names: Mapping[int, str],
) -> Optional[AwardRecommendation]:
    best = _best_gain(ranked, first_recorded_scores(history))
    if best is None:
        return None
    return _recommend(AwardType.HANDICAP_IMPROVED, best[0], names, best[1])


def lucky_draw(
    ranked: Sequence[RankedScore],
    names: Mapping[int, str],
    awarded_names: Collection[str] = (),
    rng: Optional[ChoiceSource] = None,
) -> Optional[AwardRecommendation]:
    pool = [
        row for row in ranked
        if row.rank > PODIUM_SIZE and names.get(row.member_id) not in awarded_names
    ]
    if not pool:
        return None
    winner = (rng or random.Random()).choice(pool)
    return _recommend(AwardType.LUCKY_DRAW, winner, names, None)


def recommend_awards(
    ranked: Sequence[RankedScore],
    averages: Mapping[int, Optional[float]],
    history: Sequence[Round],
    names: Mapping[int, str],
    awarded_names: Collection[str] = (),
    rng: Optional[ChoiceSource] = None,
) -> List[AwardRecommendation]:
    """All recommendations that have a valid candidate, in a fixed order."""
    picks = [
        most_improved(ranked, averages, names),
        handicap_improved(ranked, history, names),
        lucky_draw(ranked, names, awarded_names, rng),
    ]
    return [pick for pick in picks if pick is not None]
