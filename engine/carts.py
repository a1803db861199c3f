from __future__ import annotations

import math
from typing import List, Mapping, Optional, Sequence

from models.rules import CART_SIZE, DEFAULT_CART_AVERAGE

from .stats import round_half_up


def _skill(member_id: int, averages: Mapping[int, Optional[float]], default: float) -> float:
    average = averages.get(member_id)
    return default if average is None else average


def balance_carts(
    member_ids: Sequence[int],
    averages: Mapping[int, Optional[float]],
    *,
    cart_size: int = CART_SIZE,
    default_average: float = DEFAULT_CART_AVERAGE,
) -> List[List[int]]:
    """
    Split attendees into skill-balanced carts with a snake draft.

    Players are sorted best average first and dealt across ceil(n / cart_size)
    carts, reversing direction on every lap. Callers only invoke this with at
    least `cart_size` players.
    """
    ordered = sorted(member_ids, key=lambda m: _skill(m, averages, default_average))
    num_carts = math.ceil(len(ordered) / cart_size)
    carts: List[List[int]] = [[] for _ in range(num_carts)]

    for index, member_id in enumerate(ordered):
        lap, slot = divmod(index, num_carts)
        target = slot if lap % 2 == 0 else num_carts - 1 - slot
        carts[target].append(member_id)
    return carts


def group_average(
    group: Sequence[int],
    averages: Mapping[int, Optional[float]],
    default_average: float = DEFAULT_CART_AVERAGE,
) -> Optional[float]:
    if not group:
        return None
    skills = [_skill(m, averages, default_average) for m in group]
    return round_half_up(sum(skills) / len(skills), 1)
