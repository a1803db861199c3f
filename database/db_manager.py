"""PostgreSQL-backed league store.

Bundles the repositories behind the coroutine interface the league service
expects, and translates driver failures into database.exceptions.
"""

import logging
from typing import Awaitable, TypeVar

import asyncpg

from models import Expense, LeagueSnapshot, Member, Round, RoundSubmission
from database.exceptions import DatabaseError, NotFoundError, StoreUnavailableError
from database.repositories import MemberRepositoryDB, RoundRepositoryDB, SettingsRepositoryDB

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseManager:
    """LeagueStore implementation over an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
        self.members = MemberRepositoryDB(pool)
        self.settings = SettingsRepositoryDB(pool)
        self.rounds = RoundRepositoryDB(pool, self.settings)

    async def _guard(self, action: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except DatabaseError:
            raise
        except (OSError, asyncpg.InterfaceError) as e:
            logger.error("Database unreachable during %s: %s", action, e)
            raise StoreUnavailableError(f"{action} failed: {e}") from e
        except asyncpg.PostgresError as e:
            logger.error("Database error during %s: %s", action, e)
            raise DatabaseError(f"{action} failed: {e}") from e

    # ================================================================
    # Read
    # ================================================================

    async def _read_snapshot(self) -> LeagueSnapshot:
        async with self._pool.acquire() as conn:
            async with conn.transaction(isolation="repeatable_read", readonly=True):
                members = await self.members.fetch_all(conn)
                rounds = await self.rounds.fetch_all(conn)
                settings = await self.settings.fetch(conn)
        return LeagueSnapshot(members=members, rounds=rounds, settings=settings)

    async def load_snapshot(self) -> LeagueSnapshot:
        """Full consistent read of members, rounds (with children) and settings."""
        return await self._guard("load_snapshot", self._read_snapshot())

    # ================================================================
    # Write
    # ================================================================

    async def add_member(self, name: str, target_score: int) -> Member:
        return await self._guard("add_member", self.members.create_member(name, target_score))

    async def update_member(self, member_id: int, changes: dict) -> Member:
        return await self._guard(
            "update_member", self.members.update_member(member_id, **changes)
        )

    async def save_round(self, submission: RoundSubmission) -> Round:
        return await self._guard("save_round", self.rounds.save_round(submission))

    async def add_expense(
        self, round_id: int, category: str, item_name: str, amount: int
    ) -> Expense:
        return await self._guard(
            "add_expense", self.rounds.add_expense(round_id, category, item_name, amount)
        )

    async def delete_expense(self, expense_id: int) -> bool:
        return await self._guard("delete_expense", self.rounds.delete_expense(expense_id))

    async def get_round(self, round_id: int) -> Round:
        round_ = await self._guard("get_round", self.rounds.get_round(round_id))
        if round_ is None:
            raise NotFoundError(f"Round {round_id} not found")
        return round_
