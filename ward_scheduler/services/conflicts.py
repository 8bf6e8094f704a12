"""Conflict detection for externally edited rosters."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from ward_scheduler.domain.types import (
    SHIFT_ORDER,
    Absence,
    OptimizationParameters,
    ShiftAssignment,
    ShiftType,
)
from ward_scheduler.services.absences import AbsenceIndex
from ward_scheduler.services.constraints import is_forbidden_transition, work_runs


class ConflictKind(str, Enum):
    DUPLICATE_DATE = "duplicate_date"
    ABSENCE_VIOLATION = "absence_violation"
    FORBIDDEN_TRANSITION = "forbidden_transition"
    CONSECUTIVE_LIMIT = "consecutive_limit"


_KIND_ORDER = {kind: i for i, kind in enumerate(ConflictKind)}


@dataclass(frozen=True)
class ConflictDescriptor:
    kind: ConflictKind
    staff_id: int
    date: date
    shift_types: Tuple[ShiftType, ...]
    message: str


def check_conflicts(
    assignments: Iterable[ShiftAssignment],
    absences: Iterable[Absence] = (),
    params: OptimizationParameters | None = None,
) -> List[ConflictDescriptor]:
    """
    Find conflicts in a roster without modifying it.

    Always checked:
    - more than one assignment for the same (staff_id, date)
    - a date inside an absence carrying anything other than VACATION

    Checked only when ``params`` is given:
    - Night followed by Morning (if ``avoid_night_after_morning``)
    - work runs longer than ``max_consecutive_work_days``

    Returns:
        Conflicts sorted by staff id, date and kind; empty when clean
    """
    absence_index = AbsenceIndex(absences)
    by_staff_date: Dict[Tuple[int, date], List[ShiftAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_staff_date[(assignment.staff_id, assignment.date)].append(assignment)

    conflicts: List[ConflictDescriptor] = []

    for (staff_id, day), entries in by_staff_date.items():
        types = tuple(sorted((a.shift_type for a in entries), key=SHIFT_ORDER.index))
        if len(entries) > 1:
            conflicts.append(
                ConflictDescriptor(
                    ConflictKind.DUPLICATE_DATE,
                    staff_id,
                    day,
                    types,
                    f"Staff {staff_id} has {len(entries)} assignments on {day.isoformat()}: "
                    f"{', '.join(t.name for t in types)}",
                )
            )
        absence = absence_index.covering(staff_id, day)
        if absence is not None:
            wrong = tuple(t for t in types if t is not ShiftType.VACATION)
            if wrong:
                conflicts.append(
                    ConflictDescriptor(
                        ConflictKind.ABSENCE_VIOLATION,
                        staff_id,
                        day,
                        wrong,
                        f"Staff {staff_id} is absent {absence.start_date.isoformat()}.."
                        f"{absence.end_date.isoformat()} but assigned "
                        f"{', '.join(t.name for t in wrong)} on {day.isoformat()}",
                    )
                )

    if params is not None:
        conflicts.extend(_rule_conflicts(by_staff_date, params))

    conflicts.sort(key=lambda c: (c.staff_id, c.date, _KIND_ORDER[c.kind]))
    return conflicts


def _rule_conflicts(
    by_staff_date: Dict[Tuple[int, date], List[ShiftAssignment]],
    params: OptimizationParameters,
) -> List[ConflictDescriptor]:
    per_staff: Dict[int, Dict[date, ShiftType]] = defaultdict(dict)
    for (staff_id, day), entries in by_staff_date.items():
        # first in shift order wins when a date is double-booked
        per_staff[staff_id][day] = min((a.shift_type for a in entries), key=SHIFT_ORDER.index)

    found: List[ConflictDescriptor] = []
    for staff_id, days in per_staff.items():
        if params.avoid_night_after_morning:
            for day, shift_type in days.items():
                previous = days.get(day - timedelta(days=1))
                if is_forbidden_transition(previous, shift_type):
                    found.append(
                        ConflictDescriptor(
                            ConflictKind.FORBIDDEN_TRANSITION,
                            staff_id,
                            day,
                            (ShiftType.NIGHT, ShiftType.MORNING),
                            f"Staff {staff_id} works Morning on {day.isoformat()} right after a Night",
                        )
                    )
        limit = params.max_consecutive_work_days
        for first, last, length in work_runs(days.items()):
            if length > limit:
                found.append(
                    ConflictDescriptor(
                        ConflictKind.CONSECUTIVE_LIMIT,
                        staff_id,
                        first,
                        tuple(days[first + timedelta(days=i)] for i in range(length)),
                        f"Staff {staff_id} works {length} consecutive days "
                        f"{first.isoformat()}..{last.isoformat()} (limit {limit})",
                    )
                )
    return found
