from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from models.round import Round, Score
from models.settings import SeasonSettings
from models.views import HatCount, HatEvent, HatStatus

from .points import sort_scores


def worst_scorer(scores: Iterable[Score]) -> Optional[Score]:
    """
    Highest stroke count of a round.

    Among equal maximums the one entered last wins the hat, because the
    ascending sort is stable and the last element is taken.
    """
    ordered = sort_scores(scores)
    return ordered[-1] if ordered else None


def advance_hat(settings: SeasonSettings, round_obj: Round) -> SeasonSettings:
    """Settings after saving `round_obj`. Rounds without scores change nothing."""
    worst = worst_scorer(round_obj.scores)
    if worst is None:
        return settings
    return settings.model_copy(
        update={
            "hat_holder_id": worst.member_id,
            "hat_since": round_obj.date,
            "version": settings.version + 1,
        }
    )


def hat_history(rounds: Sequence[Round]) -> List[HatEvent]:
    """Replay every scored round; independent of the live settings."""
    events: List[HatEvent] = []
    for round_obj in rounds:
        worst = worst_scorer(round_obj.scores)
        if worst is None:
            continue
        events.append(
            HatEvent(
                round_id=round_obj.id,
                date=round_obj.date,
                holder_id=worst.member_id,
                score=worst.strokes,
            )
        )
    return events


def hat_counts(history: Iterable[HatEvent]) -> List[HatCount]:
    """Times each member held the hat, most first (ties by member id)."""
    counts = Counter(event.holder_id for event in history)
    return [
        HatCount(member_id=member_id, times_held=times)
        for member_id, times in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def days_held(settings: SeasonSettings, today: Optional[dt.date] = None) -> int:
    if settings.hat_since is None:
        return 0
    today = today or dt.date.today()
    return max((today - settings.hat_since).days, 0)


def hat_status(
    settings: SeasonSettings, rounds: Sequence[Round], today: Optional[dt.date] = None
) -> HatStatus:
    history = hat_history(rounds)
    return HatStatus(
        holder_id=settings.hat_holder_id,
        since=settings.hat_since,
        days_held=days_held(settings, today),
        history=history,
        counts=hat_counts(history),
    )
