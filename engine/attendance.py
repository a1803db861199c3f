from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from models.round import Round
from models.rules import ACTIVE_MONTHS, REQUIRED_ATTENDANCE
from models.views import AttendanceRow


def compute_attendance(
    rounds: Sequence[Round],
    member_ids: Optional[Iterable[int]] = None,
    *,
    active_months: Sequence[int] = ACTIVE_MONTHS,
    required: int = REQUIRED_ATTENDANCE,
) -> List[AttendanceRow]:
    """
    Monthly presence per member and whether they met the attendance quota.

    Presence is a set of month numbers, so several rounds in one month count
    once. Months outside `active_months` are still recorded but never count
    toward compliance.
    """
    rows: Dict[int, AttendanceRow] = {}
    fixed_roster = member_ids is not None
    if fixed_roster:
        for member_id in member_ids:
            rows[member_id] = AttendanceRow(member_id=member_id)

    for round_obj in rounds:
        month = round_obj.month
        for member_id in set(round_obj.attendees):
            row = rows.get(member_id)
            if row is None:
                if fixed_roster:
                    continue
                row = rows[member_id] = AttendanceRow(member_id=member_id)
            row.rounds_attended += 1
            row.months_present.add(month)

    recognised = set(active_months)
    for row in rows.values():
        row.active_months_present = len(row.months_present & recognised)
        row.compliant = row.active_months_present >= required

    return list(rows.values())


def attendance_matrix(
    rows: Iterable[AttendanceRow], active_months: Sequence[int] = ACTIVE_MONTHS
) -> Dict[int, List[bool]]:
    """member_id -> presence flag per active month, in calendar order given."""
    return {
        row.member_id: [month in row.months_present for month in active_months]
        for row in rows
    }
