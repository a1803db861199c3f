from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from models.round import Expense, Round
from models.rules import DEFAULT_ATTENDEE_COUNT, EXPENSE_BAND_HIGH, EXPENSE_BAND_LOW
from models.views import ExpenseStatus, RoundExpenseSummary, SeasonExpenseSummary

from .stats import mean_one_decimal


def per_person_cost(total: int, attendee_count: int) -> int:
    """total / attendees, rounded half up to a whole currency unit."""
    share = Decimal(total) / Decimal(attendee_count)
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def classify(
    total: int,
    per_person: int,
    band_low: int = EXPENSE_BAND_LOW,
    band_high: int = EXPENSE_BAND_HIGH,
) -> ExpenseStatus:
    if total == 0:
        return ExpenseStatus.NOT_APPLICABLE
    if per_person < band_low:
        return ExpenseStatus.INSUFFICIENT
    if per_person > band_high:
        return ExpenseStatus.EXCESSIVE
    return ExpenseStatus.ADEQUATE


def summarize_expenses(
    expenses: Iterable[Expense],
    attendee_count: Optional[int] = None,
    *,
    default_attendee_count: int = DEFAULT_ATTENDEE_COUNT,
    band_low: int = EXPENSE_BAND_LOW,
    band_high: int = EXPENSE_BAND_HIGH,
) -> RoundExpenseSummary:
    """Total, per-person share and band status for one set of line items."""
    count = attendee_count or default_attendee_count
    total = sum(e.amount for e in expenses)
    per_person = per_person_cost(total, count)
    return RoundExpenseSummary(
        total=total,
        attendee_count=count,
        per_person=per_person,
        status=classify(total, per_person, band_low, band_high),
    )


def round_expense_summary(round_obj: Round, **kwargs) -> RoundExpenseSummary:
    summary = summarize_expenses(round_obj.expenses, len(round_obj.attendees), **kwargs)
    return summary.model_copy(update={"round_id": round_obj.id, "date": round_obj.date})


def season_expense_summary(rounds: Sequence[Round], **kwargs) -> SeasonExpenseSummary:
    """
    Season totals over rounds that have any expense line.

    `rounds` holds one trend row per such round, in round order.
    """
    with_expenses = [r for r in rounds if r.expenses]
    trend: List[RoundExpenseSummary] = [round_expense_summary(r, **kwargs) for r in with_expenses]

    by_category: Dict[str, int] = {}
    for round_obj in with_expenses:
        for expense in round_obj.expenses:
            by_category[expense.category] = by_category.get(expense.category, 0) + expense.amount

    total = sum(row.total for row in trend)
    return SeasonExpenseSummary(
        total=total,
        rounds_with_expenses=len(trend),
        average_per_round=mean_one_decimal([row.total for row in trend]),
        by_category=by_category,
        rounds=trend,
    )
