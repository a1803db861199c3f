"""Environment-driven configuration.

Every league rule defaults to the constants in models.rules and can be
overridden with a LEAGUE_* variable (a .env file is honoured).
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from models.rules import LeagueRules

load_dotenv()

_INT_OVERRIDES = {
    "LEAGUE_REQUIRED_ATTENDANCE": "required_attendance",
    "LEAGUE_DUES": "dues",
    "LEAGUE_GOAL_REFUND": "goal_refund",
    "LEAGUE_EXPENSE_BAND_LOW": "expense_band_low",
    "LEAGUE_EXPENSE_BAND_HIGH": "expense_band_high",
    "LEAGUE_DEFAULT_ATTENDEES": "default_attendee_count",
    "LEAGUE_CART_SIZE": "cart_size",
    "LEAGUE_DEFAULT_TARGET": "default_target_score",
}
_FLOAT_OVERRIDES = {
    "LEAGUE_DEFAULT_CART_AVERAGE": "default_cart_average",
    "LEAGUE_REFRESH_WINDOW": "refresh_window_seconds",
}


def load_rules(environ: Optional[Dict[str, str]] = None) -> LeagueRules:
    """Build LeagueRules from the environment. Unset variables keep their defaults."""
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for var, field in _INT_OVERRIDES.items():
        if env.get(var):
            overrides[field] = int(env[var])
    for var, field in _FLOAT_OVERRIDES.items():
        if env.get(var):
            overrides[field] = float(env[var])
    if env.get("LEAGUE_ACTIVE_MONTHS"):
        overrides["active_months"] = [int(m) for m in env["LEAGUE_ACTIVE_MONTHS"].split(",") if m.strip()]
    if env.get("LEAGUE_DEFAULT_COURSE"):
        overrides["default_course"] = env["LEAGUE_DEFAULT_COURSE"]

    return LeagueRules(**overrides)


def database_url() -> Optional[str]:
    return os.environ.get("DATABASE_URL")


def admin_token() -> Optional[str]:
    return os.environ.get("LEAGUE_ADMIN_TOKEN") or None
