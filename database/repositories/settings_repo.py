"""Reads and writes for the league.settings singleton row."""

import asyncpg
import datetime as dt

from models import SeasonSettings
from database.converters import settings_from_row


class SettingsRepositoryDB:

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def fetch(self, conn) -> SeasonSettings:
        row = await conn.fetchrow("SELECT * FROM league.settings WHERE id = 1")
        return settings_from_row(row)

    async def move_hat(self, conn, member_id: int, since: dt.date) -> SeasonSettings:
        """Hand the hat to a member and bump the version.

        Runs on the caller's connection so it commits with the round that caused it.
        """
        row = await conn.fetchrow(
            """INSERT INTO league.settings (id, hat_holder_id, hat_since, version)
               VALUES (1, $1, $2, 1)
               ON CONFLICT (id) DO UPDATE
               SET hat_holder_id = EXCLUDED.hat_holder_id,
                   hat_since = EXCLUDED.hat_since,
                   version = league.settings.version + 1
               RETURNING *""",
            member_id, since,
        )
        return settings_from_row(row)
