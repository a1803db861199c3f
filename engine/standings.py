from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from models.round import Round
from models.views import StandingsEntry, StandingsRow

from .points import rank_scores


def compute_standings(
    rounds: Sequence[Round],
    member_ids: Optional[Iterable[int]] = None,
    points_table: Optional[Mapping[int, int]] = None,
) -> List[StandingsRow]:
    """
    Season standings over date-ascending rounds.

    With `member_ids`, every listed member gets a row (possibly empty) and
    scores from unlisted ids are ignored. Without it, rows are created for
    whoever scored, in order of first appearance.

    Ordering is total: points desc, then wins desc, then roster order.
    """
    rows: Dict[int, StandingsRow] = {}
    fixed_roster = member_ids is not None
    if fixed_roster:
        for member_id in member_ids:
            rows[member_id] = StandingsRow(member_id=member_id)

    for round_obj in rounds:
        if not round_obj.scores:
            continue
        for ranked in rank_scores(round_obj.scores, points_table):
            row = rows.get(ranked.member_id)
            if row is None:
                if fixed_roster:
                    continue
                row = rows[ranked.member_id] = StandingsRow(member_id=ranked.member_id)

            row.total_points += ranked.points
            row.rounds_counted += 1
            if ranked.rank == 1:
                row.wins += 1
            if ranked.rank <= 3:
                row.podiums += 1
            row.history.append(
                StandingsEntry(
                    round_id=round_obj.id,
                    date=round_obj.date,
                    rank=ranked.rank,
                    points=ranked.points,
                    score=ranked.strokes,
                )
            )

    roster_order = {member_id: index for index, member_id in enumerate(rows)}
    return sorted(
        rows.values(),
        key=lambda r: (-r.total_points, -r.wins, roster_order[r.member_id]),
    )


def scored_only(standings: Iterable[StandingsRow]) -> List[StandingsRow]:
    """Rows for members with at least one scored round."""
    return [row for row in standings if row.rounds_counted > 0]


def points_behind_leader(standings: Sequence[StandingsRow]) -> Dict[int, int]:
    if not standings:
        return {}
    leader_total = standings[0].total_points
    return {row.member_id: leader_total - row.total_points for row in standings}
