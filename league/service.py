"""Admin-gated writes and cached reads over a LeagueStore.

Every write is a two-phase apply: the provisional snapshot is installed
locally first, then the store write runs. On success local state is
replaced by a fresh authoritative read; on failure it is rolled back to the
snapshot from before the write and StoreWriteError is raised.
"""

import datetime as dt
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from database.exceptions import DatabaseError
from engine.awards import ChoiceSource
from engine.hat import advance_hat
from engine.season import summarize_season
from models import Expense, LeagueRules, LeagueSnapshot, Member, MemberUpdate, Round
from models.rules import DEFAULT_RULES
from models.views import AwardRecommendation, SeasonReport

from .draft import RoundDraft
from .exceptions import (
    CollaboratorError,
    InvalidExpenseError,
    InvalidMemberUpdateError,
    StoreReadError,
    StoreWriteError,
    UnknownMemberError,
    UnknownRoundError,
)
from .store import LeagueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STORE_FAILURES = (DatabaseError, OSError)


def _first_error(exc: ValidationError) -> str:
    return exc.errors()[0]['msg']


class LeagueService:
    """Single-writer league state. Non-admin writes are silent no-ops."""

    def __init__(
        self,
        store: LeagueStore,
        rules: LeagueRules = DEFAULT_RULES,
        *,
        clock: Callable[[], dt.date] = dt.date.today,
    ):
        self._store = store
        self.rules = rules
        self._clock = clock
        self._snapshot = LeagueSnapshot()
        self._report: Optional[SeasonReport] = None
        self._report_date: Optional[dt.date] = None
        self.error: Optional[CollaboratorError] = None

    @property
    def snapshot(self) -> LeagueSnapshot:
        return self._snapshot

    def _replace(self, snapshot: LeagueSnapshot) -> None:
        self._snapshot = snapshot
        self._report = None

    # ================================================================
    # Read
    # ================================================================

    async def reload(self) -> LeagueSnapshot:
        """Full re-read. On failure the last good snapshot stays and `error` is set."""
        try:
            snapshot = await self._store.load_snapshot()
        except _STORE_FAILURES as exc:
            self.error = StoreReadError(f"Could not load league data: {exc}")
            logger.warning("League snapshot read failed", exc_info=True)
            raise self.error from exc
        self.error = None
        self._replace(snapshot)
        return snapshot

    async def retry(self) -> LeagueSnapshot:
        return await self.reload()

    def report(self, today: Optional[dt.date] = None) -> SeasonReport:
        """Every derived view for the current snapshot.

        Cached per snapshot and calendar day.
        """
        if today is not None:
            return summarize_season(self._snapshot, self.rules, today)
        current = self._clock()
        if self._report is None or self._report_date != current:
            self._report = summarize_season(self._snapshot, self.rules, current)
            self._report_date = current
        return self._report

    def averages(self) -> Dict[int, Optional[float]]:
        return {member_id: row.average for member_id, row in self.report().stats.items()}

    def new_draft(self) -> RoundDraft:
        return RoundDraft(course=self.rules.default_course)

    def recommend_awards(
        self, draft: RoundDraft, rng: Optional[ChoiceSource] = None
    ) -> List[AwardRecommendation]:
        return draft.recommendations(
            self.averages(), self._snapshot.rounds, self._snapshot.member_names(), rng
        )

    # ================================================================
    # Write plumbing
    # ================================================================

    def _ignored(self, action: str) -> None:
        logger.info("Ignoring %s: caller is not an admin", action)

    async def _apply(
        self, action: str, provisional: LeagueSnapshot, write: Callable[[], Awaitable[T]]
    ) -> T:
        previous = self._snapshot
        self._replace(provisional)
        try:
            result = await write()
        except _STORE_FAILURES as exc:
            self._replace(previous)
            logger.warning("%s failed; local state rolled back", action, exc_info=True)
            raise StoreWriteError(f"{action} failed: {exc}") from exc

        logger.info("%s applied", action)
        try:
            await self.reload()
        except StoreReadError:
            # The write landed; provisional state stands until the next refresh.
            logger.warning("Reload after %s failed; showing provisional state", action)
        return result

    def _with(self, **changes: Any) -> LeagueSnapshot:
        current = self._snapshot
        return LeagueSnapshot(
            members=changes.get("members", current.members),
            rounds=changes.get("rounds", current.rounds),
            settings=changes.get("settings", current.settings),
        )

    # ================================================================
    # Members
    # ================================================================

    async def add_member(
        self, name: str, target_score: Optional[int] = None, *, is_admin: bool
    ) -> Optional[Member]:
        if not is_admin:
            self._ignored("add_member")
            return None
        try:
            member = Member(
                id=self._snapshot.next_member_id(),
                name=name,
                target_score=(
                    self.rules.default_target_score if target_score is None else target_score
                ),
            )
        except ValidationError as exc:
            raise InvalidMemberUpdateError(_first_error(exc)) from exc

        provisional = self._with(members=[*self._snapshot.members, member])
        return await self._apply(
            "add_member",
            provisional,
            lambda: self._store.add_member(member.name, member.target_score),
        )

    async def update_member(
        self, member_id: int, fields: Dict[str, Any], *, is_admin: bool
    ) -> Optional[Member]:
        if not is_admin:
            self._ignored("update_member")
            return None
        current = self._snapshot.get_member(member_id)
        if current is None:
            raise UnknownMemberError(member_id)
        try:
            changes = MemberUpdate(**fields).changes()
            updated = Member(**{**current.model_dump(), **changes})
        except ValidationError as exc:
            raise InvalidMemberUpdateError(_first_error(exc)) from exc
        if not changes:
            return current

        provisional = self._with(
            members=[updated if m.id == member_id else m for m in self._snapshot.members]
        )
        return await self._apply(
            "update_member",
            provisional,
            lambda: self._store.update_member(member_id, changes),
        )

    # ================================================================
    # Rounds
    # ================================================================

    async def save_round(self, draft: RoundDraft, *, is_admin: bool) -> Optional[Round]:
        """Validate and save the draft. The draft is reset only if the save succeeds."""
        if not is_admin:
            self._ignored("save_round")
            return None
        submission = draft.to_submission(self._snapshot.member_names())
        for member_id in submission.attendees:
            if self._snapshot.get_member(member_id) is None:
                raise UnknownMemberError(member_id)

        round_ = submission.to_round(self._snapshot.next_round_id())
        provisional = self._with(
            rounds=[*self._snapshot.rounds, round_],
            settings=advance_hat(self._snapshot.settings, round_),
        )
        saved = await self._apply(
            "save_round", provisional, lambda: self._store.save_round(submission)
        )
        draft.reset()
        return saved

    # ================================================================
    # Expenses
    # ================================================================

    async def add_expense(
        self,
        round_id: int,
        category: str,
        item_name: str,
        amount: int,
        *,
        is_admin: bool,
    ) -> Optional[Expense]:
        if not is_admin:
            self._ignored("add_expense")
            return None
        target = self._snapshot.get_round(round_id)
        if target is None:
            raise UnknownRoundError(round_id)
        try:
            expense = Expense(category=category, item_name=item_name, amount=amount)
        except ValidationError as exc:
            raise InvalidExpenseError(_first_error(exc)) from exc

        updated = target.model_copy(update={"expenses": [*target.expenses, expense]})
        provisional = self._with(
            rounds=[updated if r.id == round_id else r for r in self._snapshot.rounds]
        )
        return await self._apply(
            "add_expense",
            provisional,
            lambda: self._store.add_expense(
                round_id, expense.category, expense.item_name, expense.amount
            ),
        )

    async def delete_expense(self, expense_id: int, *, is_admin: bool) -> Optional[bool]:
        if not is_admin:
            self._ignored("delete_expense")
            return None
        rounds = [
            r.model_copy(update={"expenses": [e for e in r.expenses if e.id != expense_id]})
            for r in self._snapshot.rounds
        ]
        return await self._apply(
            "delete_expense",
            self._with(rounds=rounds),
            lambda: self._store.delete_expense(expense_id),
        )
