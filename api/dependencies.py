import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request

from league.config import admin_token
from league.service import LeagueService


def get_service(request: Request) -> LeagueService:
    """FastAPI dependency that provides the LeagueService."""
    return request.app.state.service


def is_admin(x_admin_token: Optional[str] = Header(None)) -> bool:
    """Derive the admin flag from the X-Admin-Token header.

    With no LEAGUE_ADMIN_TOKEN configured nobody is an admin.
    """
    expected = admin_token()
    if not expected or not x_admin_token:
        return False
    return secrets.compare_digest(x_admin_token, expected)


def applied(result, action: str):
    """Turn the service's non-admin no-op (None) into a 403."""
    if result is None:
        raise HTTPException(403, f"{action} requires admin rights")
    return result
