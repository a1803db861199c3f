from .attendance import attendance_matrix, compute_attendance
from .awards import recommend_awards
from .carts import balance_carts, group_average
from .dues import dues_summary
from .expenses import round_expense_summary, season_expense_summary, summarize_expenses
from .hat import advance_hat, hat_counts, hat_history, worst_scorer
from .points import points_for_rank, rank_scores
from .season import summarize_season
from .standings import compute_standings, scored_only
from .stats import all_member_stats, member_stats

__all__ = [
    "points_for_rank",
    "rank_scores",
    "member_stats",
    "all_member_stats",
    "compute_standings",
    "scored_only",
    "compute_attendance",
    "attendance_matrix",
    "worst_scorer",
    "advance_hat",
    "hat_history",
    "hat_counts",
    "balance_carts",
    "group_average",
    "recommend_awards",
    "summarize_expenses",
    "round_expense_summary",
    "season_expense_summary",
    "dues_summary",
    "summarize_season",
]
