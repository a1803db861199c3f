"""League constants and the rules bundle the engine is parameterised with."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Dict, List


# --- Championship points (rank -> points) ---

POINTS_TABLE: Dict[int, int] = {1: 25, 2: 18, 3: 15, 4: 12, 5: 10, 6: 8}

# --- Attendance ---

ACTIVE_MONTHS: List[int] = [3, 4, 5, 6, 8, 9, 10, 11]
REQUIRED_ATTENDANCE = 5

# --- Money (currency units) ---

DUES = 1_500_000
GOAL_REFUND = 500_000
EXPENSE_BAND_LOW = 100_000
EXPENSE_BAND_HIGH = 150_000
DEFAULT_ATTENDEE_COUNT = 12

# --- Round builder ---

CART_SIZE = 4
DEFAULT_CART_AVERAGE = 100.0  # unranked players count as the weakest
DEFAULT_COURSE = "Taekwang CC"
DEFAULT_TARGET_SCORE = 95
DEFAULT_SEASON_YEAR = 2026

# --- Change propagation ---

REFRESH_WINDOW_SECONDS = 0.3


class LeagueRules(BaseModel):
    """Every tunable league rule in one immutable bundle."""
    model_config = ConfigDict(frozen=True)

    points_table: Dict[int, int] = Field(default_factory=lambda: dict(POINTS_TABLE))
    active_months: List[int] = Field(default_factory=lambda: list(ACTIVE_MONTHS))
    required_attendance: int = Field(REQUIRED_ATTENDANCE, ge=0)
    dues: int = Field(DUES, ge=0)
    goal_refund: int = Field(GOAL_REFUND, ge=0)
    expense_band_low: int = Field(EXPENSE_BAND_LOW, ge=0)
    expense_band_high: int = Field(EXPENSE_BAND_HIGH, ge=0)
    default_attendee_count: int = Field(DEFAULT_ATTENDEE_COUNT, ge=1)
    cart_size: int = Field(CART_SIZE, ge=1)
    default_cart_average: float = DEFAULT_CART_AVERAGE
    default_course: str = DEFAULT_COURSE
    default_target_score: int = Field(DEFAULT_TARGET_SCORE, gt=0)
    refresh_window_seconds: float = Field(REFRESH_WINDOW_SECONDS, ge=0)

    @model_validator(mode='after')
    def validate_ranges(self):
        if self.expense_band_low > self.expense_band_high:
            raise ValueError(
                f"Expense band low ({self.expense_band_low}) exceeds high ({self.expense_band_high})"
            )
        for month in self.active_months:
            if not 1 <= month <= 12:
                raise ValueError(f"Active month {month} must be 1-12")
        return self


DEFAULT_RULES = LeagueRules()
