"""Expense line items by id. Adding one lives under /api/rounds/{round_id}/expenses."""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import applied, get_service, is_admin
from league.service import LeagueService

router = APIRouter()


@router.delete("/{expense_id}", status_code=204)
async def delete_expense(
    expense_id: int,
    admin: bool = Depends(is_admin),
    service: LeagueService = Depends(get_service),
):
    deleted = applied(await service.delete_expense(expense_id, is_admin=admin), "delete_expense")
    if not deleted:
        raise HTTPException(404, "Expense not found")
