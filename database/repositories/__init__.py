from .member_repo import MemberRepositoryDB
from .settings_repo import SettingsRepositoryDB
from .round_repo import RoundRepositoryDB

__all__ = ["MemberRepositoryDB", "SettingsRepositoryDB", "RoundRepositoryDB"]
