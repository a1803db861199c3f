from __future__ import annotations

from typing import Mapping, Sequence

from models.member import Member
from models.rules import DUES, GOAL_REFUND
from models.views import DuesRow, DuesSummary, MemberStats


def target_met(member: Member, stats: MemberStats) -> bool:
    """Best score at or under target. Shown next to goal_achieved, never written to it."""
    return stats.best_score is not None and stats.best_score <= member.target_score


def dues_summary(
    members: Sequence[Member],
    stats: Mapping[int, MemberStats],
    *,
    dues: int = DUES,
    goal_refund: int = GOAL_REFUND,
) -> DuesSummary:
    """Dues collected and goal refunds owed across active members."""
    active = [m for m in members if m.active]
    rows = []
    for member in active:
        member_stats = stats.get(member.id) or MemberStats(member_id=member.id)
        rows.append(
            DuesRow(
                member_id=member.id,
                name=member.name,
                target_score=member.target_score,
                best_score=member_stats.best_score,
                target_met=target_met(member, member_stats),
                dues_paid=member.dues_paid,
                goal_achieved=member.goal_achieved,
            )
        )

    return DuesSummary(
        dues_per_member=dues,
        goal_refund=goal_refund,
        total_collected=sum(1 for m in active if m.dues_paid) * dues,
        total_refunded=sum(1 for m in active if m.goal_achieved) * goal_refund,
        rows=rows,
    )
