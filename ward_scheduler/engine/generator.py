"""Day-by-day roster generation."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ward_scheduler.config import SchedulerConfig
from ward_scheduler.domain.types import (
    Absence,
    DateRange,
    OptimizationParameters,
    ShiftAssignment,
    ShiftType,
    StaffMember,
)
from ward_scheduler.services.absences import AbsenceIndex
from ward_scheduler.services.constraints import validate_date_range, validate_parameters
from ward_scheduler.services.roster import RosterView

from .base import BaseAllocator
from .greedy import GreedyAllocator
from .state import RunState


def generate_assignments(
    date_range: DateRange | tuple[date, date],
    staff_pool: Iterable[StaffMember],
    absences: Iterable[Absence] = (),
    params: OptimizationParameters | None = None,
    allocator: BaseAllocator | None = None,
    cfg: SchedulerConfig | None = None,
) -> List[ShiftAssignment]:
    """
    Generate one assignment per staff member per date.

    Args:
        date_range: Inclusive range, or a (start, end) tuple
        staff_pool: Staff taking part in the run
        absences: Approved absences; covered dates become VACATION
        params: Optimization parameters (defaults from ``cfg`` when omitted)
        allocator: Day allocation strategy (default: ``GreedyAllocator``)
        cfg: SchedulerConfig supplying the range cap and shift split

    Returns:
        Assignments ordered by date, then staff id

    Raises:
        DateRangeInvertedError: If the range starts after it ends
        DateRangeTooLargeError: If the range exceeds ``cfg.max_range_days``
        ValidationError: If the parameters or staff records are invalid
    """
    cfg = cfg or SchedulerConfig()
    if isinstance(date_range, DateRange):
        start, end = date_range.start, date_range.end
    else:
        start, end = date_range
    date_range = validate_date_range(start, end, cfg.max_range_days)
    params = validate_parameters(params if params is not None else cfg.optimization)

    roster = RosterView(staff_pool)
    if not len(roster):
        return []

    allocator = allocator or GreedyAllocator(cfg.shift_split)
    absence_index = AbsenceIndex(absences, date_range)
    state = RunState.start(roster.ids)
    assignments: List[ShiftAssignment] = []

    for day in date_range:
        absent = absence_index.absent_on(day, roster.ids)
        available = [m for m in roster if m.staff_id not in absent]

        day_shifts = dict(allocator.assign_day(day, available, state, params)) if available else {}
        for staff_id in absent:
            day_shifts[staff_id] = ShiftType.VACATION

        for staff_id in roster.ids:
            assignments.append(ShiftAssignment(staff_id, day, day_shifts.get(staff_id, ShiftType.REST)))

        state = state.advance(day, {sid: day_shifts.get(sid, ShiftType.REST) for sid in roster.ids})

    return assignments
