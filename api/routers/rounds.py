"""Round API endpoints: history, draft helpers (carts, preview), and save."""

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from api.dependencies import applied, get_service, is_admin
from api.schemas import (
    CartTeamsResponse,
    CreateExpenseRequest,
    RoundDetailResponse,
    RoundDraftRequest,
    RoundPreviewResponse,
)
from engine.expenses import round_expense_summary
from engine.points import rank_scores
from league.draft import RoundDraft
from league.service import LeagueService
from models import Expense, Round

router = APIRouter()


def build_draft(service: LeagueService, req: RoundDraftRequest) -> RoundDraft:
    """Replay a client-side draft onto a RoundDraft so the usual validation applies."""
    draft = service.new_draft()
    draft.date = req.date
    if req.course:
        draft.course = req.course
    draft.set_attendees(req.attendees)
    draft.cart_teams = [list(team) for team in req.cart_teams]
    for entry in req.scores:
        draft.set_score(entry.member_id, entry.strokes)
    names = service.snapshot.member_names()
    for award in req.awards:
        draft.add_award(award.award_type, award.winner_name, names)
    return draft


@router.get("", response_model=List[Round])
async def list_rounds(service: LeagueService = Depends(get_service)):
    """All rounds, oldest first."""
    return service.snapshot.rounds


@router.get("/{round_id}", response_model=RoundDetailResponse)
async def get_round(round_id: int, service: LeagueService = Depends(get_service)):
    round_ = service.snapshot.get_round(round_id)
    if not round_:
        raise HTTPException(404, "Round not found")
    rules = service.rules
    return RoundDetailResponse(
        round=round_,
        ranks=rank_scores(round_.scores, rules.points_table),
        expenses=round_expense_summary(
            round_,
            default_attendee_count=rules.default_attendee_count,
            band_low=rules.expense_band_low,
            band_high=rules.expense_band_high,
        ),
    )


@router.post("/carts", response_model=CartTeamsResponse)
async def make_cart_teams(req: RoundDraftRequest, service: LeagueService = Depends(get_service)):
    """Balance the selected attendees into carts by season average."""
    draft = build_draft(service, req)
    averages = service.averages()
    rules = service.rules
    draft.make_cart_teams(
        averages, cart_size=rules.cart_size, default_average=rules.default_cart_average
    )
    return CartTeamsResponse(
        cart_teams=draft.cart_teams,
        cart_averages=draft.cart_averages(averages, rules.default_cart_average),
    )


@router.post("/preview", response_model=RoundPreviewResponse)
async def preview_round(req: RoundDraftRequest, service: LeagueService = Depends(get_service)):
    """Rank preview, prospective hat holder and award suggestions for a draft."""
    draft = build_draft(service, req)
    worst = draft.worst_scorer()
    return RoundPreviewResponse(
        ranks=draft.rank_preview(service.rules.points_table),
        worst_scorer_id=worst.member_id if worst else None,
        recommendations=service.recommend_awards(draft),
    )


@router.post("", response_model=Round, status_code=201)
async def save_round(
    req: RoundDraftRequest,
    admin: bool = Depends(is_admin),
    service: LeagueService = Depends(get_service),
):
    if not admin:
        return applied(None, "save_round")
    draft = build_draft(service, req)
    saved = await service.save_round(draft, is_admin=admin)
    return applied(saved, "save_round")


@router.post("/{round_id}/expenses", response_model=Expense, status_code=201)
async def add_expense(
    round_id: int,
    req: CreateExpenseRequest,
    admin: bool = Depends(is_admin),
    service: LeagueService = Depends(get_service),
):
    expense = await service.add_expense(
        round_id, req.category, req.item_name, req.amount, is_admin=admin
    )
    return applied(expense, "add_expense")
