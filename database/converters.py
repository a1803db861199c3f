"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the normalized league schema
and the nested Round/Member/SeasonSettings models.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from models import (
    Award,
    Expense,
    Member,
    Round,
    RoundSubmission,
    Score,
    SeasonSettings,
)
from models.views import RankedScore


# ================================================================
# Row -> Model (reads)
# ================================================================

def member_from_row(row) -> Member:
    """league.members row -> Member model."""
    return Member(
        id=row["id"],
        name=row["name"],
        target_score=row["target_score"],
        next_target=row["next_target"],
        active=row["active"],
        dues_paid=row["dues_paid"],
        goal_achieved=row["goal_achieved"],
    )


def score_from_row(row) -> Score:
    return Score(member_id=row["member_id"], strokes=row["strokes"])


def award_from_row(row) -> Award:
    return Award(award_type=row["award_type"], winner_name=row["winner_name"])


def expense_from_row(row) -> Expense:
    """league.round_expenses row -> Expense model."""
    return Expense(
        id=row["id"],
        category=row["category"],
        item_name=row["item_name"] or "",
        amount=row["amount"],
    )


def cart_teams_from_rows(cart_rows: Iterable) -> List[List[int]]:
    """Group cart_assignments rows (ordered by cart_number, position) into teams."""
    carts: Dict[int, List[int]] = {}
    for r in cart_rows:
        carts.setdefault(r["cart_number"], []).append(r["member_id"])
    return [carts[n] for n in sorted(carts)]


def round_from_rows(
    round_row,
    attendee_rows: list,
    score_rows: list,
    cart_rows: list,
    award_rows: list,
    expense_rows: list,
) -> Round:
    """Assemble a full Round from rows across the six round tables.

    Child rows must already be ordered (attendees by position, scores by
    entry_order, awards and expenses by id).
    """
    return Round(
        id=round_row["id"],
        date=round_row["round_date"],
        course=round_row["course"] or "",
        attendees=[r["member_id"] for r in attendee_rows],
        scores=[score_from_row(r) for r in score_rows],
        cart_teams=cart_teams_from_rows(cart_rows),
        awards=[award_from_row(r) for r in award_rows],
        expenses=[expense_from_row(r) for r in expense_rows],
    )


def group_by_round(rows: Iterable) -> Dict[int, list]:
    """Bucket child rows by round_id, preserving query order."""
    grouped: Dict[int, list] = defaultdict(list)
    for r in rows:
        grouped[r["round_id"]].append(r)
    return grouped


def settings_from_row(row) -> SeasonSettings:
    """league.settings singleton row -> SeasonSettings. Missing row means defaults."""
    if row is None:
        return SeasonSettings()
    return SeasonSettings(
        hat_holder_id=row["hat_holder_id"],
        hat_since=row["hat_since"],
        season_year=row["season_year"],
        version=row["version"],
    )


# ================================================================
# Model -> Row tuples (writes)
# ================================================================

def attendee_rows(submission: RoundSubmission, round_id: int) -> List[tuple]:
    """Attendees -> (round_id, member_id, position) tuples for executemany."""
    return [
        (round_id, member_id, position)
        for position, member_id in enumerate(submission.attendees)
    ]


def score_rows(
    submission: RoundSubmission, ranked: List[RankedScore], round_id: int
) -> List[tuple]:
    """Scores -> (round_id, member_id, strokes, rank, points, entry_order) tuples."""
    by_member = {r.member_id: r for r in ranked}
    rows = []
    for entry_order, score in enumerate(submission.scores):
        r = by_member[score.member_id]
        rows.append((round_id, score.member_id, score.strokes, r.rank, r.points, entry_order))
    return rows


def cart_rows(submission: RoundSubmission, round_id: int) -> List[tuple]:
    """Cart teams -> (round_id, cart_number, member_id, position) tuples."""
    return [
        (round_id, cart_number, member_id, position)
        for cart_number, team in enumerate(submission.cart_teams)
        for position, member_id in enumerate(team)
    ]


def award_rows(submission: RoundSubmission, round_id: int) -> List[tuple]:
    return [(round_id, a.award_type, a.winner_name) for a in submission.awards]
