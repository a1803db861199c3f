from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from models.round import Score
from models.rules import POINTS_TABLE
from models.views import RankedScore


def points_for_rank(rank: object, table: Optional[Mapping[int, int]] = None) -> int:
    """Championship points for a 1-based finish rank. Anything off the table is 0."""
    if isinstance(rank, bool) or not isinstance(rank, int):
        return 0
    return (table if table is not None else POINTS_TABLE).get(rank, 0)


def sort_scores(scores: Iterable[Score]) -> List[Score]:
    """Ascending by strokes. Stable, so equal strokes keep entry order."""
    return sorted(scores, key=lambda s: s.strokes)


def rank_scores(
    scores: Iterable[Score], table: Optional[Mapping[int, int]] = None
) -> List[RankedScore]:
    """
    Rank one round's scores.

    Ties are not merged: equal stroke counts still get sequential ranks in
    the order the scores were entered.
    """
    return [
        RankedScore(
            member_id=score.member_id,
            strokes=score.strokes,
            rank=index,
            points=points_for_rank(index, table),
        )
        for index, score in enumerate(sort_scores(scores), start=1)
    ]
