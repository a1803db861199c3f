"""CRUD operations for rounds, their child tables, and expenses."""

import asyncpg
from typing import List, Optional

from engine.points import rank_scores
from models import Expense, Round, RoundSubmission
from database.converters import (
    attendee_rows,
    award_rows,
    cart_rows,
    expense_from_row,
    group_by_round,
    round_from_rows,
    score_rows,
)
from database.exceptions import DuplicateError, IntegrityError, NotFoundError
from database.repositories.settings_repo import SettingsRepositoryDB


class RoundRepositoryDB:
    """Async CRUD for rounds and everything nested under them."""

    def __init__(self, pool: asyncpg.Pool, settings_repo: SettingsRepositoryDB):
        self._pool = pool
        self._settings_repo = settings_repo

    # ================================================================
    # Private helpers
    # ================================================================

    async def _fetch_children(self, conn, round_ids: List[int]) -> tuple:
        """Load every child table for a set of rounds, grouped by round_id."""
        attendees = await conn.fetch(
            """SELECT * FROM league.round_attendees
               WHERE round_id = ANY($1::int[]) ORDER BY round_id, position""",
            round_ids,
        )
        scores = await conn.fetch(
            """SELECT * FROM league.round_scores
               WHERE round_id = ANY($1::int[]) ORDER BY round_id, entry_order""",
            round_ids,
        )
        carts = await conn.fetch(
            """SELECT * FROM league.cart_assignments
               WHERE round_id = ANY($1::int[]) ORDER BY round_id, cart_number, position""",
            round_ids,
        )
        awards = await conn.fetch(
            """SELECT * FROM league.round_awards
               WHERE round_id = ANY($1::int[]) ORDER BY round_id, id""",
            round_ids,
        )
        expenses = await conn.fetch(
            """SELECT * FROM league.round_expenses
               WHERE round_id = ANY($1::int[]) ORDER BY round_id, id""",
            round_ids,
        )
        return tuple(group_by_round(rows) for rows in (attendees, scores, carts, awards, expenses))

    async def _assemble_rounds(self, conn, round_rows) -> List[Round]:
        if not round_rows:
            return []
        ids = [r["id"] for r in round_rows]
        attendees, scores, carts, awards, expenses = await self._fetch_children(conn, ids)
        return [
            round_from_rows(
                r,
                attendees.get(r["id"], []),
                scores.get(r["id"], []),
                carts.get(r["id"], []),
                awards.get(r["id"], []),
                expenses.get(r["id"], []),
            )
            for r in round_rows
        ]

    # ================================================================
    # Read
    # ================================================================

    async def fetch_all(self, conn) -> List[Round]:
        """All rounds, oldest first, on a caller-supplied connection."""
        rows = await conn.fetch("SELECT * FROM league.rounds ORDER BY round_date, id")
        return await self._assemble_rounds(conn, rows)

    async def get_round(self, round_id: int) -> Optional[Round]:
        """Get a round with attendees, scores, carts, awards and expenses."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM league.rounds WHERE id = $1", round_id
            )
            if not row:
                return None
            rounds = await self._assemble_rounds(conn, [row])
            return rounds[0]

    # ================================================================
    # Create
    # ================================================================

    async def save_round(self, submission: RoundSubmission) -> Round:
        """Write a round and all of its children in one transaction.

        The header goes first so children can reference it. If the submission
        names a worst scorer the hat moves in the same transaction.
        """
        ranked = rank_scores(submission.scores)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    round_row = await conn.fetchrow(
                        """INSERT INTO league.rounds (round_date, course)
                           VALUES ($1, $2) RETURNING *""",
                        submission.date, submission.course,
                    )
                    round_id = round_row["id"]

                    await conn.executemany(
                        """INSERT INTO league.round_attendees (round_id, member_id, position)
                           VALUES ($1, $2, $3)""",
                        attendee_rows(submission, round_id),
                    )
                    if submission.scores:
                        await conn.executemany(
                            """INSERT INTO league.round_scores
                               (round_id, member_id, strokes, rank, points, entry_order)
                               VALUES ($1, $2, $3, $4, $5, $6)""",
                            score_rows(submission, ranked, round_id),
                        )
                    if submission.cart_teams:
                        await conn.executemany(
                            """INSERT INTO league.cart_assignments
                               (round_id, cart_number, member_id, position)
                               VALUES ($1, $2, $3, $4)""",
                            cart_rows(submission, round_id),
                        )
                    if submission.awards:
                        await conn.executemany(
                            """INSERT INTO league.round_awards (round_id, award_type, winner_name)
                               VALUES ($1, $2, $3)""",
                            award_rows(submission, round_id),
                        )
                    if submission.worst_scorer is not None:
                        await conn.execute(
                            """INSERT INTO league.hat_history (round_id, member_id, strokes, since)
                               VALUES ($1, $2, $3, $4)""",
                            round_id, submission.worst_scorer.member_id,
                            submission.worst_scorer.strokes, submission.date,
                        )
                        await self._settings_repo.move_hat(
                            conn, submission.worst_scorer.member_id, submission.date
                        )
            return submission.to_round(round_id)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(str(e)) from e

    # ================================================================
    # Expenses
    # ================================================================

    async def add_expense(
        self, round_id: int, category: str, item_name: str, amount: int
    ) -> Expense:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """INSERT INTO league.round_expenses (round_id, category, item_name, amount)
                       VALUES ($1, $2, $3, $4) RETURNING *""",
                    round_id, category, item_name, amount,
                )
                return expense_from_row(row)
        except asyncpg.ForeignKeyViolationError as e:
            raise NotFoundError(f"Round {round_id} not found") from e
        except asyncpg.CheckViolationError as e:
            raise IntegrityError(f"Invalid expense: {e}") from e

    async def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense line. Returns True if a row was removed."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM league.round_expenses WHERE id = $1", expense_id
            )
            return result == "DELETE 1"
