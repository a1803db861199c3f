from .draft import RoundDraft
from .exceptions import (
    CollaboratorError,
    DuplicateAwardWinnerError,
    EmptyAttendeesError,
    InvalidStrokeCountError,
    LeagueError,
    LeagueValidationError,
    MissingRoundDateError,
    StoreReadError,
    StoreWriteError,
)
from .refresh import SnapshotRefresher
from .service import LeagueService
from .store import InMemoryLeagueStore, LeagueStore

__all__ = [
    "RoundDraft",
    "LeagueService",
    "SnapshotRefresher",
    "LeagueStore",
    "InMemoryLeagueStore",
    "LeagueError",
    "LeagueValidationError",
    "MissingRoundDateError",
    "EmptyAttendeesError",
    "InvalidStrokeCountError",
    "DuplicateAwardWinnerError",
    "CollaboratorError",
    "StoreReadError",
    "StoreWriteError",
]
