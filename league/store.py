from typing import Dict, List, Optional, Protocol

from models import Expense, LeagueSnapshot, Member, Round, RoundSubmission, SeasonSettings
from database.exceptions import NotFoundError


class LeagueStore(Protocol):
    """Interface for the durable storage collaborator.

    Implementors raise database.exceptions.DatabaseError (or a subclass) on
    failure. Any class with matching coroutine signatures satisfies this
    protocol.
    """

    async def load_snapshot(self) -> LeagueSnapshot:
        """Full read with attendees, scores, carts, awards and expenses nested under rounds."""
        ...

    async def add_member(self, name: str, target_score: int) -> Member:
        ...

    async def update_member(self, member_id: int, changes: dict) -> Member:
        ...

    async def save_round(self, submission: RoundSubmission) -> Round:
        """Write the round and all its children atomically; move the hat if worst_scorer is set."""
        ...

    async def add_expense(
        self, round_id: int, category: str, item_name: str, amount: int
    ) -> Expense:
        ...

    async def delete_expense(self, expense_id: int) -> bool:
        ...


class InMemoryLeagueStore:
    """Process-local store. Used for tests and for running without PostgreSQL."""

    def __init__(self, snapshot: Optional[LeagueSnapshot] = None):
        snapshot = snapshot or LeagueSnapshot()
        self._members: Dict[int, Member] = {
            m.id: m.model_copy(deep=True) for m in snapshot.members
        }
        self._rounds: Dict[int, Round] = {
            r.id: r.model_copy(deep=True) for r in snapshot.rounds
        }
        self._settings: SeasonSettings = snapshot.settings.model_copy()
        self._next_member_id = snapshot.next_member_id()
        self._next_round_id = snapshot.next_round_id()
        self._next_expense_id = 1 + max(
            (e.id for r in snapshot.rounds for e in r.expenses if e.id is not None),
            default=0,
        )

    async def load_snapshot(self) -> LeagueSnapshot:
        return LeagueSnapshot(
            members=[m.model_copy(deep=True) for m in self._members.values()],
            rounds=[r.model_copy(deep=True) for r in self._rounds.values()],
            settings=self._settings.model_copy(),
        )

    async def add_member(self, name: str, target_score: int) -> Member:
        member = Member(id=self._next_member_id, name=name, target_score=target_score)
        self._members[member.id] = member
        self._next_member_id += 1
        return member.model_copy()

    async def update_member(self, member_id: int, changes: dict) -> Member:
        member = self._members.get(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        updated = Member(**{**member.model_dump(), **changes})
        self._members[member_id] = updated
        return updated.model_copy()

    async def save_round(self, submission: RoundSubmission) -> Round:
        round_ = submission.to_round(self._next_round_id)
        self._rounds[round_.id] = round_
        self._next_round_id += 1
        if submission.worst_scorer is not None:
            self._settings = self._settings.model_copy(
                update={
                    "hat_holder_id": submission.worst_scorer.member_id,
                    "hat_since": submission.date,
                    "version": self._settings.version + 1,
                }
            )
        return round_.model_copy(deep=True)

    async def add_expense(
        self, round_id: int, category: str, item_name: str, amount: int
    ) -> Expense:
        round_ = self._rounds.get(round_id)
        if round_ is None:
            raise NotFoundError(f"Round {round_id} not found")
        expense = Expense(
            id=self._next_expense_id, category=category, item_name=item_name, amount=amount
        )
        self._next_expense_id += 1
        round_.expenses = [*round_.expenses, expense]
        return expense.model_copy()

    async def delete_expense(self, expense_id: int) -> bool:
        for round_ in self._rounds.values():
            remaining: List[Expense] = [e for e in round_.expenses if e.id != expense_id]
            if len(remaining) != len(round_.expenses):
                round_.expenses = remaining
                return True
        return False
