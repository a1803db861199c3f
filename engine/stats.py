from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from models.round import Round
from models.views import MemberStats


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero (the builtin round() rounds half to even)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def mean_one_decimal(values: Sequence[int]) -> Optional[float]:
    if not values:
        return None
    exact = Decimal(sum(values)) / Decimal(len(values))
    return float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def member_scores(rounds: Iterable[Round], member_id: int) -> List[int]:
    """Stroke counts for a member in round order, skipping rounds they didn't score in."""
    scores: List[int] = []
    for round_obj in rounds:
        score = round_obj.get_score(member_id)
        if score is not None:
            scores.append(score.strokes)
    return scores


def member_stats(rounds: Iterable[Round], member_id: int) -> MemberStats:
    """Average (one decimal), rounds played and best score for one member."""
    scores = member_scores(rounds, member_id)
    return MemberStats(
        member_id=member_id,
        average=mean_one_decimal(scores),
        rounds_played=len(scores),
        scores=scores,
        best_score=min(scores) if scores else None,
    )


def all_member_stats(rounds: Sequence[Round], member_ids: Iterable[int]) -> Dict[int, MemberStats]:
    return {member_id: member_stats(rounds, member_id) for member_id in member_ids}


def averages(stats: Dict[int, MemberStats]) -> Dict[int, Optional[float]]:
    return {member_id: row.average for member_id, row in stats.items()}
