import pytest
import datetime as dt

from engine.attendance import attendance_matrix, compute_attendance
from engine.awards import first_recorded_scores, lucky_draw, recommend_awards
from engine.carts import balance_carts, group_average
from engine.dues import dues_summary, target_met
from engine.expenses import (
    classify,
    per_person_cost,
    round_expense_summary,
    season_expense_summary,
    summarize_expenses,
)
from engine.hat import advance_hat, days_held, hat_counts, hat_history, worst_scorer
from engine.points import points_for_rank, rank_scores
from engine.season import summarize_season
from engine.standings import compute_standings, points_behind_leader, scored_only
from engine.stats import all_member_stats, mean_one_decimal, member_stats, round_half_up
from models import Expense, LeagueSnapshot, Member, Round, Score, SeasonSettings
from models.views import ExpenseStatus


def _round(round_id, date, scores, attendees=None, expenses=None):
    """Helper: round where everyone in `scores` (member_id -> strokes) attended."""
    return Round(
        id=round_id,
        date=date,
        attendees=attendees if attendees is not None else list(scores),
        scores=[Score(member_id=m, strokes=s) for m, s in scores.items()],
        expenses=expenses or [],
    )


class FixedChoice:
    """Deterministic stand-in for random.Random."""

    def __init__(self, index=0):
        self.index = index
        self.seen = None

    def choice(self, seq):
        self.seen = list(seq)
        return seq[self.index]


# ================================================================
# Points
# ================================================================

def test_points_table_values():
    assert [points_for_rank(r) for r in range(1, 7)] == [25, 18, 15, 12, 10, 8]


def test_points_monotonic_and_zero_outside_table():
    for r1 in range(1, 7):
        for r2 in range(r1 + 1, 7):
            assert points_for_rank(r1) >= points_for_rank(r2)
    for rank in (0, -1, 7, 8, 50):
        assert points_for_rank(rank) == 0


def test_points_for_non_integer_rank():
    assert points_for_rank(None) == 0
    assert points_for_rank("1") == 0
    assert points_for_rank(1.0) == 0
    assert points_for_rank(True) == 0


def test_rank_scores_ties_stay_sequential():
    ranked = rank_scores([
        Score(member_id=1, strokes=90),
        Score(member_id=2, strokes=85),
        Score(member_id=3, strokes=90),
    ])
    assert [(r.member_id, r.rank, r.points) for r in ranked] == [
        (2, 1, 25), (1, 2, 18), (3, 3, 15),
    ]


def test_rank_scores_beyond_table_get_zero_points():
    scores = [Score(member_id=m, strokes=80 + m) for m in range(1, 9)]
    ranked = rank_scores(scores)
    assert [r.points for r in ranked] == [25, 18, 15, 12, 10, 8, 0, 0]


# ================================================================
# Stats
# ================================================================

def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(0.25, 1) == 0.3
    assert round(2.5) == 2               # builtin differs


def test_member_stats():
    rounds = [
        _round(1, dt.date(2026, 3, 8), {1: 90, 2: 100}),
        _round(2, dt.date(2026, 4, 12), {1: 85}, attendees=[1, 2]),
        _round(3, dt.date(2026, 5, 10), {1: 88}),
    ]
    stats = member_stats(rounds, 1)
    assert stats.average == pytest.approx(87.7)
    assert stats.rounds_played == 3
    assert stats.best_score == 85
    assert stats.scores == [90, 85, 88]

    absent = member_stats(rounds, 9)
    assert absent.average is None
    assert absent.rounds_played == 0
    assert absent.best_score is None


def test_mean_one_decimal_rounds_half_up():
    assert mean_one_decimal([85, 86]) == pytest.approx(85.5)
    assert mean_one_decimal([80, 81, 81, 81]) == pytest.approx(80.8)   # 80.75
    assert mean_one_decimal([]) is None


# ================================================================
# Standings
# ================================================================

def _season():
    return [
        _round(1, dt.date(2026, 3, 8), {1: 82, 2: 88, 3: 95}),
        _round(2, dt.date(2026, 4, 12), {2: 80, 3: 84, 1: 90}),
        _round(3, dt.date(2026, 5, 10), {3: 79, 1: 81}),
        Round(id=4, date=dt.date(2026, 6, 14), attendees=[1, 2, 3]),   # unscored
    ]


def test_standings_totals_match_history():
    rows = compute_standings(_season(), [1, 2, 3, 4])
    for row in rows:
        assert row.total_points == sum(e.points for e in row.history)
        assert row.wins == sum(1 for e in row.history if e.rank == 1)
        assert row.podiums == sum(1 for e in row.history if e.rank <= 3)
        assert row.rounds_counted == len(row.history)


def test_standings_order_and_tie_break():
    rows = compute_standings(_season(), [1, 2, 3, 4])
    # 1: 25+15+18=58, 2: 18+25=43, 3: 15+18+25=58 ; 1 and 3 tie on points and wins
    assert [(r.member_id, r.total_points) for r in rows] == [(1, 58), (3, 58), (2, 43), (4, 0)]


def test_standings_wins_break_points_ties():
    rounds = [
        _round(1, dt.date(2026, 3, 8), {1: 80, 2: 81}),                      # 1: 25, 2: 18
        _round(2, dt.date(2026, 4, 8), {2: 80, 1: 81}),                      # 2: 25, 1: 18
        _round(3, dt.date(2026, 5, 8), {5: 70, 3: 80}),                      # 3: 18
        _round(4, dt.date(2026, 6, 8), {5: 70, 6: 75, 3: 80}),               # 3: 15
        _round(5, dt.date(2026, 8, 8), {5: 70, 6: 71, 7: 72, 8: 73, 3: 80}), # 3: 10
    ]
    rows = compute_standings(rounds, [3, 1, 2])
    assert [r.total_points for r in rows] == [43, 43, 43]
    assert [(r.member_id, r.wins) for r in rows] == [(1, 1), (2, 1), (3, 0)]


def test_scored_only_and_gap_to_leader():
    rows = compute_standings(_season(), [1, 2, 3, 4])
    assert [r.member_id for r in scored_only(rows)] == [1, 3, 2]
    assert points_behind_leader(rows) == {1: 0, 3: 0, 2: 15, 4: 58}
    assert points_behind_leader([]) == {}


def test_standings_without_roster_ignores_nobody():
    rows = compute_standings(_season())
    assert {r.member_id for r in rows} == {1, 2, 3}


# ================================================================
# Attendance
# ================================================================

def test_attendance_counts_months_once():
    rounds = [
        Round(id=1, date=dt.date(2026, 4, 5), attendees=[1, 1, 2]),
        Round(id=2, date=dt.date(2026, 4, 19), attendees=[1]),
    ]
    rows = {r.member_id: r for r in compute_attendance(rounds, [1, 2])}
    assert rows[1].months_present == {4}
    assert rows[1].rounds_attended == 2
    assert rows[1].active_months_present == 1
    assert rows[2].rounds_attended == 1


def test_attendance_compliance_ignores_inactive_months():
    dates = [dt.date(2026, m, 10) for m in (1, 3, 4, 5, 7, 12)]
    rounds = [Round(id=i, date=d, attendees=[1]) for i, d in enumerate(dates, start=1)]
    row = compute_attendance(rounds, [1])[0]
    assert row.months_present == {1, 3, 4, 5, 7, 12}
    assert row.active_months_present == 3
    assert row.compliant is False

    more = rounds + [Round(id=9, date=dt.date(2026, 8, 2), attendees=[1]),
                     Round(id=10, date=dt.date(2026, 9, 6), attendees=[1])]
    assert compute_attendance(more, [1])[0].compliant is True


def test_attendance_matrix():
    rounds = [Round(id=1, date=dt.date(2026, 3, 1), attendees=[1])]
    matrix = attendance_matrix(compute_attendance(rounds, [1, 2]))
    assert matrix[1][0] is True
    assert not any(matrix[2])
    assert len(matrix[1]) == 8


# ================================================================
# Hat
# ================================================================

def test_worst_scorer_tie_goes_to_last_entered():
    scores = [Score(member_id=1, strokes=90), Score(member_id=2, strokes=85), Score(member_id=3, strokes=90)]
    assert worst_scorer(scores).member_id == 3
    assert worst_scorer([]) is None


def test_advance_hat():
    settings = SeasonSettings()
    r = _round(5, dt.date(2026, 4, 12), {1: 82, 2: 88, 3: 95})
    moved = advance_hat(settings, r)
    assert moved.hat_holder_id == 3
    assert moved.hat_since == dt.date(2026, 4, 12)
    assert moved.version == 1
    assert settings.hat_holder_id is None          # input untouched

    unscored = Round(id=6, date=dt.date(2026, 5, 1), attendees=[1])
    assert advance_hat(moved, unscored) is moved


def test_hat_history_and_counts():
    history = hat_history(_season())
    assert [(e.round_id, e.holder_id, e.score) for e in history] == [(1, 3, 95), (2, 1, 90), (3, 1, 81)]
    counts = hat_counts(history)
    assert [(c.member_id, c.times_held) for c in counts] == [(1, 2), (3, 1)]


def test_days_held():
    settings = SeasonSettings(hat_holder_id=3, hat_since=dt.date(2026, 4, 12))
    assert days_held(settings, dt.date(2026, 4, 22)) == 10
    assert days_held(SeasonSettings(), dt.date(2026, 4, 22)) == 0


# ================================================================
# Carts
# ================================================================

def test_balance_carts_snake_draft():
    averages = {i: avg for i, avg in enumerate([70, 75, 80, 85, 90, 95, 100, 105], start=1)}
    carts = balance_carts(list(averages), averages)
    assert [[averages[m] for m in cart] for cart in carts] == [[70, 85, 90, 105], [75, 80, 95, 100]]
    assert group_average(carts[0], averages) == pytest.approx(group_average(carts[1], averages), abs=1.0)


def test_balance_carts_uneven_and_defaults():
    averages = {1: 80.0, 2: 90.0, 3: None}
    carts = balance_carts([1, 2, 3, 4, 5], averages)
    assert len(carts) == 2
    assert sorted(m for cart in carts for m in cart) == [1, 2, 3, 4, 5]
    assert carts[0][0] == 1                               # best average leads cart 1
    assert group_average([3, 4], averages) == 100.0       # unknowns count as the default
    assert group_average([], averages) is None


# ================================================================
# Awards
# ================================================================

def test_recommend_awards():
    history = [_round(1, dt.date(2026, 3, 8), {1: 100, 2: 90, 3: 85, 4: 95, 5: 99})]
    ranked = rank_scores([Score(member_id=m, strokes=s) for m, s in
                          {1: 88, 2: 89, 3: 84, 4: 97, 5: 98}.items()])
    averages = {1: 95.0, 2: 90.5, 3: 86.0, 4: 95.0, 5: None}
    names = {1: "A", 2: "B", 3: "C", 4: "D", 5: "E"}

    picks = recommend_awards(ranked, averages, history, names, rng=FixedChoice(0))
    by_type = {p.award_type: p for p in picks}

    assert by_type["most_improved"].member_id == 1
    assert by_type["most_improved"].margin == pytest.approx(7.0)
    assert by_type["handicap_improved"].member_id == 1
    assert by_type["handicap_improved"].margin == pytest.approx(12.0)
    assert by_type["lucky_draw"].member_id == 4


def test_no_improvement_awards_without_a_positive_gain():
    history = [_round(1, dt.date(2026, 3, 8), {1: 85, 2: 90, 3: 88})]
    ranked = rank_scores([Score(member_id=m, strokes=s) for m, s in {1: 85, 2: 92, 3: 95}.items()])
    averages = {1: 85.0, 2: 90.0, 3: None}
    names = {1: "A", 2: "B", 3: "C"}

    picks = recommend_awards(ranked, averages, history, names, rng=FixedChoice(0))
    assert {p.award_type for p in picks}.isdisjoint({"most_improved", "handicap_improved"})


def test_member_without_average_can_still_win_handicap_improved():
    history = [_round(1, dt.date(2026, 3, 8), {1: 85, 2: 100})]
    ranked = rank_scores([Score(member_id=m, strokes=s) for m, s in {1: 86, 2: 94}.items()])
    averages = {1: 85.0, 2: None}
    names = {1: "A", 2: "B"}

    by_type = {p.award_type: p for p in recommend_awards(ranked, averages, history, names)}
    assert "most_improved" not in by_type
    assert by_type["handicap_improved"].member_id == 2
    assert by_type["handicap_improved"].margin == pytest.approx(6.0)


def test_lucky_draw_excludes_podium_and_existing_winners():
    ranked = rank_scores([Score(member_id=m, strokes=80 + m) for m in range(1, 6)])
    names = {m: f"P{m}" for m in range(1, 6)}
    rng = FixedChoice(0)
    pick = lucky_draw(ranked, names, {"P4"}, rng)
    assert [r.member_id for r in rng.seen] == [5]
    assert pick.winner_name == "P5"

    assert lucky_draw(ranked[:3], names, (), FixedChoice()) is None


def test_first_recorded_scores():
    assert first_recorded_scores(_season()) == {1: 82, 2: 88, 3: 95}


# ================================================================
# Expenses
# ================================================================

def test_expense_summary_adequate():
    expenses = [
        Expense(category="food", amount=500_000),
        Expense(category="cart", amount=300_000),
        Expense(category="caddie", amount=200_000),
    ]
    summary = summarize_expenses(expenses, 8)
    assert summary.total == 1_000_000
    assert summary.per_person == 125_000
    assert summary.status == ExpenseStatus.ADEQUATE


def test_expense_classification_bands():
    small = [Expense(category="food", amount=50_000), Expense(category="cart", amount=30_000),
             Expense(category="caddie", amount=20_000)]
    assert summarize_expenses(small, 8).per_person == 12_500
    assert summarize_expenses(small, 8).status == ExpenseStatus.INSUFFICIENT
    assert classify(2_000_000, 250_000) == ExpenseStatus.EXCESSIVE
    assert summarize_expenses([], 8).status == ExpenseStatus.NOT_APPLICABLE


def test_expense_attendee_count_defaults_to_twelve():
    summary = summarize_expenses([Expense(category="food", amount=1_200_000)], 0)
    assert summary.attendee_count == 12
    assert summary.per_person == 100_000


def test_per_person_cost_rounds_half_up():
    assert per_person_cost(10, 4) == 3          # 2.5
    assert per_person_cost(100_000, 3) == 33_333


def test_season_expense_average_rounds_half_up():
    rounds = [
        _round(i, dt.date(2026, 3, i), {1: 80}, expenses=[Expense(id=i, category="food", amount=amount)])
        for i, amount in enumerate([1, 1, 1, 2], start=1)
    ]
    assert season_expense_summary(rounds).average_per_round == 1.3       # 1.25


def test_season_expense_summary():
    rounds = [
        _round(1, dt.date(2026, 3, 8), {1: 80}, expenses=[Expense(id=1, category="food", amount=100_000)]),
        _round(2, dt.date(2026, 4, 8), {1: 80}),
        _round(3, dt.date(2026, 5, 8), {1: 80}, expenses=[Expense(id=2, category="food", amount=50_000),
                                                          Expense(id=3, category="cart", amount=25_000)]),
    ]
    summary = season_expense_summary(rounds)
    assert summary.total == 175_000
    assert summary.rounds_with_expenses == 2
    assert summary.average_per_round == pytest.approx(87_500.0)
    assert summary.by_category == {"food": 150_000, "cart": 25_000}
    assert [r.round_id for r in summary.rounds] == [1, 3]

    row = round_expense_summary(rounds[0])
    assert row.attendee_count == 1
    assert row.date == dt.date(2026, 3, 8)


# ================================================================
# Dues
# ================================================================

def test_dues_summary_counts_active_members_only():
    members = [
        Member(id=1, name="A", target_score=85, dues_paid=True, goal_achieved=True),
        Member(id=2, name="B", target_score=80, dues_paid=True),
        Member(id=3, name="C", dues_paid=True, active=False),
    ]
    rounds = [_round(1, dt.date(2026, 3, 8), {1: 82, 2: 88})]
    stats = all_member_stats(rounds, [1, 2, 3])
    summary = dues_summary(members, stats)

    assert summary.total_collected == 3_000_000
    assert summary.total_refunded == 500_000
    assert [row.member_id for row in summary.rows] == [1, 2]
    assert summary.rows[0].target_met is True
    assert summary.rows[1].target_met is False


def test_target_met_never_sets_goal_achieved():
    member = Member(id=1, name="A", target_score=85)
    stats = member_stats([_round(1, dt.date(2026, 3, 8), {1: 82})], 1)
    assert target_met(member, stats) is True
    assert member.goal_achieved is False


# ================================================================
# End-to-end
# ================================================================

def test_season_report_end_to_end():
    members = [
        Member(id=1, name="A", target_score=85),
        Member(id=2, name="B", target_score=80),
        Member(id=3, name="C", target_score=90),
    ]
    round_ = _round(1, dt.date(2026, 4, 12), {1: 82, 2: 88, 3: 95})
    settings = advance_hat(SeasonSettings(), round_)
    snapshot = LeagueSnapshot(members=members, rounds=[round_], settings=settings)

    report = summarize_season(snapshot, today=dt.date(2026, 4, 19))

    assert [(r.member_id, r.total_points) for r in report.standings] == [(1, 25), (2, 18), (3, 15)]
    assert report.hat.holder_id == 3
    assert report.hat.since == dt.date(2026, 4, 12)
    assert report.hat.days_held == 7
    assert report.rounds_scored == 1
    assert report.stats[1].best_score == 82

    dues_rows = {row.member_id: row for row in report.dues.rows}
    assert dues_rows[1].target_met is True
    assert dues_rows[1].goal_achieved is False
    assert snapshot.get_member(1).goal_achieved is False
