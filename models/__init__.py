from .base import BaseLeagueModel
from .member import Member, MemberUpdate
from .round import Award, AwardType, Expense, Round, RoundSubmission, Score
from .rules import DEFAULT_RULES, LeagueRules
from .settings import HatState, SeasonSettings
from .snapshot import LeagueSnapshot

__all__ = [
    "BaseLeagueModel",
    "Member",
    "MemberUpdate",
    "Award",
    "AwardType",
    "Expense",
    "Round",
    "RoundSubmission",
    "Score",
    "DEFAULT_RULES",
    "LeagueRules",
    "HatState",
    "SeasonSettings",
    "LeagueSnapshot",
]
