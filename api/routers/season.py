"""Season-wide derived views. Read-only; every view comes from one cached report."""

from fastapi import APIRouter, Depends, Query
from typing import Dict, List, Optional

from api.dependencies import get_service
from engine.standings import points_behind_leader, scored_only
from league.service import LeagueService
from models.views import (
    AttendanceRow,
    DuesSummary,
    HatStatus,
    SeasonExpenseSummary,
    SeasonReport,
    StandingsRow,
)

router = APIRouter()


@router.get("", response_model=SeasonReport)
async def get_season(service: LeagueService = Depends(get_service)):
    return service.report()


@router.get("/standings", response_model=List[StandingsRow])
async def get_standings(
    only_scored: bool = Query(False, alias="scored_only"),
    service: LeagueService = Depends(get_service),
):
    """Standings table. Pass scored_only=true to hide members without a score."""
    rows = service.report().standings
    return scored_only(rows) if only_scored else rows


@router.get("/standings/gaps", response_model=Dict[int, int])
async def get_points_behind_leader(service: LeagueService = Depends(get_service)):
    return points_behind_leader(service.report().standings)


@router.get("/attendance", response_model=List[AttendanceRow])
async def get_attendance(service: LeagueService = Depends(get_service)):
    return service.report().attendance


@router.get("/hat", response_model=HatStatus)
async def get_hat(service: LeagueService = Depends(get_service)):
    return service.report().hat


@router.get("/expenses", response_model=SeasonExpenseSummary)
async def get_expenses(service: LeagueService = Depends(get_service)):
    return service.report().expenses


@router.get("/dues", response_model=Optional[DuesSummary])
async def get_dues(service: LeagueService = Depends(get_service)):
    return service.report().dues


@router.post("/reload")
async def reload_season(service: LeagueService = Depends(get_service)):
    """Retry a failed read, or force a fresh one."""
    snapshot = await service.retry()
    return {"members": len(snapshot.members), "rounds": len(snapshot.rounds)}
