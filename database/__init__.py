from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.notifications import ChangeListener
from database.repositories import MemberRepositoryDB, RoundRepositoryDB, SettingsRepositoryDB
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
    StoreUnavailableError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "ChangeListener",
    "MemberRepositoryDB",
    "RoundRepositoryDB",
    "SettingsRepositoryDB",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "IntegrityError",
    "StoreUnavailableError",
]
