import pytest
import datetime as dt
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from api.main import create_app
from database.exceptions import DatabaseError
from league.store import InMemoryLeagueStore
from models import Expense, LeagueRules, LeagueSnapshot, Member, Round, Score

ADMIN = {"X-Admin-Token": "s3cret"}


def _snapshot():
    return LeagueSnapshot(
        members=[
            Member(id=1, name="A", target_score=85),
            Member(id=2, name="B", target_score=80),
            Member(id=3, name="C", target_score=90),
        ],
        rounds=[
            Round(
                id=1,
                date=dt.date(2026, 3, 8),
                attendees=[1, 2, 3],
                scores=[Score(member_id=1, strokes=90), Score(member_id=2, strokes=92),
                        Score(member_id=3, strokes=99)],
                expenses=[Expense(id=1, category="food", amount=360_000)],
            )
        ],
    )


@pytest.fixture
def store():
    return InMemoryLeagueStore(_snapshot())


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setenv("LEAGUE_ADMIN_TOKEN", "s3cret")
    app = create_app(store=store, rules=LeagueRules())
    with TestClient(app) as c:
        yield c


def _round_body(**overrides):
    body = {
        "date": "2026-04-12",
        "attendees": [1, 2, 3],
        "scores": [
            {"member_id": 1, "strokes": 82},
            {"member_id": 2, "strokes": 88},
            {"member_id": 3, "strokes": 95},
        ],
        "awards": [{"award_type": "longest_drive", "winner_name": "B"}],
    }
    body.update(overrides)
    return body


# ================================================================
# Reads
# ================================================================

def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_season_report(client):
    r = client.get("/api/season")
    assert r.status_code == 200
    data = r.json()
    assert data["season_year"] == 2026
    assert data["rounds_scored"] == 1
    assert data["standings"][0]["member_id"] == 1
    assert data["dues"]["dues_per_member"] == 1_500_000


def test_standings_and_gaps(client):
    rows = client.get("/api/season/standings").json()
    assert [(r["member_id"], r["total_points"]) for r in rows] == [(1, 25), (2, 18), (3, 15)]

    gaps = client.get("/api/season/standings/gaps").json()
    assert gaps == {"1": 0, "2": 7, "3": 10}


def test_members_and_stats(client):
    members = client.get("/api/members").json()
    assert [m["name"] for m in members] == ["A", "B", "C"]

    stats = client.get("/api/members/2/stats").json()
    assert stats["average"] == pytest.approx(92.0)
    assert client.get("/api/members/9").status_code == 404


def test_round_detail(client):
    r = client.get("/api/rounds/1")
    assert r.status_code == 200
    data = r.json()
    assert [row["points"] for row in data["ranks"]] == [25, 18, 15]
    assert data["expenses"]["per_person"] == 120_000
    assert data["expenses"]["status"] == "adequate"

    assert client.get("/api/rounds/99").status_code == 404


def test_preview_and_carts(client):
    preview = client.post("/api/rounds/preview", json=_round_body(awards=[])).json()
    assert [r["member_id"] for r in preview["ranks"]] == [1, 2, 3]
    assert preview["worst_scorer_id"] == 3
    assert {p["award_type"] for p in preview["recommendations"]} >= {"most_improved"}

    carts = client.post("/api/rounds/carts", json={"attendees": [1, 2, 3]}).json()
    assert carts["cart_teams"] == []                 # fewer than one full cart


# ================================================================
# Writes
# ================================================================

def test_save_round_as_admin(client):
    r = client.post("/api/rounds", json=_round_body(), headers=ADMIN)
    assert r.status_code == 201
    assert r.json()["id"] == 2

    hat = client.get("/api/season/hat").json()
    assert hat["holder_id"] == 3
    assert hat["since"] == "2026-04-12"


def test_writes_without_admin_are_forbidden(client, store):
    assert client.post("/api/rounds", json=_round_body()).status_code == 403
    assert client.post("/api/members", json={"name": "D"}, headers={"X-Admin-Token": "nope"}).status_code == 403
    assert client.delete("/api/expenses/1").status_code == 403
    assert len(client.get("/api/rounds").json()) == 1


def test_invalid_round_without_admin_is_forbidden_not_validated(client):
    bad_strokes = _round_body(scores=[{"member_id": 1, "strokes": 0}])
    r = client.post("/api/rounds", json=bad_strokes)
    assert r.status_code == 403
    assert "Stroke" not in r.json()["detail"]

    dup = _round_body(awards=[
        {"award_type": "longest_drive", "winner_name": "B"},
        {"award_type": "nearest_pin", "winner_name": "B"},
    ])
    assert client.post("/api/rounds", json=dup, headers={"X-Admin-Token": "nope"}).status_code == 403


def test_round_validation_errors(client):
    missing_date = client.post("/api/rounds", json=_round_body(date=None), headers=ADMIN)
    assert missing_date.status_code == 422

    dup = _round_body(awards=[
        {"award_type": "longest_drive", "winner_name": "B"},
        {"award_type": "nearest_pin", "winner_name": "B"},
    ])
    assert client.post("/api/rounds", json=dup, headers=ADMIN).status_code == 422

    not_attending = _round_body(attendees=[1, 2])
    assert client.post("/api/rounds", json=not_attending, headers=ADMIN).status_code == 422

    bad_strokes = _round_body(scores=[{"member_id": 1, "strokes": 0}])
    assert client.post("/api/rounds", json=bad_strokes, headers=ADMIN).status_code == 422


def test_save_round_store_failure_is_503(client, store):
    store.save_round = AsyncMock(side_effect=DatabaseError("down"))
    r = client.post("/api/rounds", json=_round_body(), headers=ADMIN)
    assert r.status_code == 503
    assert len(client.get("/api/rounds").json()) == 1


def test_member_create_and_update(client):
    r = client.post("/api/members", json={"name": "D"}, headers=ADMIN)
    assert r.status_code == 201
    assert r.json()["target_score"] == 95

    r = client.patch("/api/members/4", json={"dues_paid": True}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["dues_paid"] is True
    assert r.json()["goal_achieved"] is False

    assert client.patch("/api/members/99", json={"active": False}, headers=ADMIN).status_code == 404
    assert client.patch("/api/members/4", json={"target_score": 0}, headers=ADMIN).status_code == 422


def test_expenses(client):
    r = client.post("/api/rounds/1/expenses", json={"category": "cart", "amount": 240_000}, headers=ADMIN)
    assert r.status_code == 201
    expense_id = r.json()["id"]

    summary = client.get("/api/season/expenses").json()
    assert summary["total"] == 600_000

    assert client.delete(f"/api/expenses/{expense_id}", headers=ADMIN).status_code == 204
    assert client.delete(f"/api/expenses/{expense_id}", headers=ADMIN).status_code == 404
    assert client.post("/api/rounds/9/expenses", json={"category": "x", "amount": 1}, headers=ADMIN).status_code == 404
