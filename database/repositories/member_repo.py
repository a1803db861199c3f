"""CRUD operations for the league.members table."""

import asyncpg
from typing import List, Optional

from models import Member
from database.converters import member_from_row
from database.exceptions import IntegrityError, NotFoundError


class MemberRepositoryDB:
    """Async CRUD for members. Members are deactivated, never deleted."""

    UPDATABLE = {"name", "target_score", "next_target", "active", "dues_paid", "goal_achieved"}

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def fetch_all(self, conn) -> List[Member]:
        """All members in roster order, on a caller-supplied connection."""
        rows = await conn.fetch("SELECT * FROM league.members ORDER BY id")
        return [member_from_row(r) for r in rows]

    async def get_member(self, member_id: int) -> Optional[Member]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.members WHERE id = $1", member_id
            )
            return member_from_row(row) if row else None

    # ================================================================
    # Create
    # ================================================================

    async def create_member(self, name: str, target_score: int) -> Member:
        """Insert a member. Returns Member with DB-generated id."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO league.members (name, target_score)
                       VALUES ($1, $2) RETURNING *""",
                    name, target_score,
                )
                return member_from_row(row)
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(f"Invalid member: {e}") from e

    # ================================================================
    # Update
    # ================================================================

    async def update_member(self, member_id: int, **fields) -> Member:
        """Update member fields. Raises NotFoundError if the member does not exist."""
        updates = {k: v for k, v in fields.items() if k in self.UPDATABLE}
        if not updates:
            member = await self.get_member(member_id)
            if member is None:
                raise NotFoundError(f"Member {member_id} not found")
            return member

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [member_id] + list(updates.values())

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE league.members SET {set_clause} WHERE id = $1 RETURNING *",
                    *values,
                )
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(f"Invalid member update: {e}") from e
        if not row:
            raise NotFoundError(f"Member {member_id} not found")
        return member_from_row(row)
