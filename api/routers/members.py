"""Member API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from api.dependencies import applied, get_service, is_admin
from api.schemas import CreateMemberRequest, UpdateMemberRequest
from league.service import LeagueService
from models import Member
from models.views import MemberStats

router = APIRouter()


@router.get("", response_model=List[Member])
async def list_members(
    include_inactive: bool = Query(True),
    service: LeagueService = Depends(get_service),
):
    snapshot = service.snapshot
    return snapshot.members if include_inactive else snapshot.active_members


@router.get("/{member_id}", response_model=Member)
async def get_member(member_id: int, service: LeagueService = Depends(get_service)):
    member = service.snapshot.get_member(member_id)
    if not member:
        raise HTTPException(404, "Member not found")
    return member


@router.get("/{member_id}/stats", response_model=MemberStats)
async def get_member_stats(member_id: int, service: LeagueService = Depends(get_service)):
    stats = service.report().stats.get(member_id)
    if stats is None:
        raise HTTPException(404, "Member not found")
    return stats


@router.post("", response_model=Member, status_code=201)
async def create_member(
    req: CreateMemberRequest,
    admin: bool = Depends(is_admin),
    service: LeagueService = Depends(get_service),
):
    member = await service.add_member(req.name, req.target_score, is_admin=admin)
    return applied(member, "add_member")


@router.patch("/{member_id}", response_model=Member)
async def update_member(
    member_id: int,
    req: UpdateMemberRequest,
    admin: bool = Depends(is_admin),
    service: LeagueService = Depends(get_service),
):
    """Update roster fields. dues_paid and goal_achieved are only ever set here."""
    member = await service.update_member(
        member_id, req.model_dump(exclude_unset=True), is_admin=admin
    )
    return applied(member, "update_member")
