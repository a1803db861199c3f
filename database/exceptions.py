"""Errors raised by the league repositories.

Repositories translate asyncpg failures into these; LeagueService treats
any of them as the store being unable to complete a read or write.
"""


class DatabaseError(Exception):
    """Any league storage failure."""


class NotFoundError(DatabaseError):
    """The member, round or expense id has no row."""


class DuplicateError(DatabaseError):
    """A second award to one winner in a round, or another UNIQUE clash."""


class IntegrityError(DatabaseError):
    """A score for a non-attendee, a non-positive amount, or another FK/CHECK failure."""


class StoreUnavailableError(DatabaseError):
    """PostgreSQL is unreachable or dropped the connection mid-call."""
