from __future__ import annotations

import datetime as dt
from typing import Optional

from models.rules import DEFAULT_RULES, LeagueRules
from models.snapshot import LeagueSnapshot
from models.views import SeasonReport

from .attendance import compute_attendance
from .dues import dues_summary
from .expenses import season_expense_summary
from .hat import hat_status
from .standings import compute_standings
from .stats import all_member_stats


def summarize_season(
    snapshot: LeagueSnapshot,
    rules: LeagueRules = DEFAULT_RULES,
    today: Optional[dt.date] = None,
) -> SeasonReport:
    """Run every aggregator over one snapshot. Nothing is shared between them."""
    member_ids = snapshot.member_ids()
    rounds = snapshot.rounds
    stats = all_member_stats(rounds, member_ids)

    return SeasonReport(
        season_year=snapshot.settings.season_year,
        rounds_scored=sum(1 for r in rounds if r.has_scores()),
        stats=stats,
        standings=compute_standings(rounds, member_ids, rules.points_table),
        attendance=compute_attendance(
            rounds,
            [m.id for m in snapshot.active_members],
            active_months=rules.active_months,
            required=rules.required_attendance,
        ),
        hat=hat_status(snapshot.settings, rounds, today),
        expenses=season_expense_summary(
            rounds,
            default_attendee_count=rules.default_attendee_count,
            band_low=rules.expense_band_low,
            band_high=rules.expense_band_high,
        ),
        dues=dues_summary(
            snapshot.members, stats, dues=rules.dues, goal_refund=rules.goal_refund
        ),
    )
