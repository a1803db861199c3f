import datetime as dt
from enum import Enum
from pydantic import Field
from typing import Optional

from .base import BaseLeagueModel
from .rules import DEFAULT_SEASON_YEAR


class HatState(str, Enum):
    """Observable states of the hat-penalty tracker."""
    UNASSIGNED = "unassigned"
    HELD = "held"


class SeasonSettings(BaseLeagueModel):
    """Season-wide singleton. Passed explicitly through every snapshot."""
    hat_holder_id: Optional[int] = None
    hat_since: Optional[dt.date] = None
    season_year: int = DEFAULT_SEASON_YEAR
    version: int = Field(0, ge=0)

    @property
    def state(self) -> HatState:
        if self.hat_holder_id is None:
            return HatState.UNASSIGNED
        return HatState.HELD
