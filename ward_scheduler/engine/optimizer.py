"""Swap-based repair of an existing roster."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, Iterable, List, Set, Tuple

from ward_scheduler.domain.types import (
    OptimizationParameters,
    ShiftAssignment,
    ShiftType,
    StaffMember,
)
from ward_scheduler.services.constraints import is_forbidden_transition, validate_parameters

ONE_DAY = timedelta(days=1)
BALANCE_MARGIN = 2.0


class _Grid:
    """Mutable staff x date view of a roster with locked cells."""

    def __init__(self, assignments: List[ShiftAssignment], staff: Dict[int, StaffMember]):
        self.staff = staff
        self.cells: Dict[int, Dict[date, ShiftType]] = defaultdict(dict)
        self.locked: Set[Tuple[int, date]] = set()

        seen = Counter((a.staff_id, a.date) for a in assignments)
        for a in assignments:
            key = (a.staff_id, a.date)
            self.cells[a.staff_id].setdefault(a.date, a.shift_type)
            if (
                seen[key] > 1
                or a.manually_assigned
                or a.shift_type is ShiftType.VACATION
                or a.staff_id not in staff
            ):
                self.locked.add(key)

    def get(self, staff_id: int, day: date) -> ShiftType | None:
        return self.cells.get(staff_id, {}).get(day)

    def movable(self, staff_id: int, day: date) -> bool:
        return (staff_id, day) not in self.locked and self.get(staff_id, day) is not None

    def dates(self) -> List[date]:
        return sorted({d for days in self.cells.values() for d in days})

    def staff_ids(self) -> List[int]:
        return sorted(sid for sid in self.cells if sid in self.staff)

    def work_count(self, staff_id: int) -> int:
        return sum(1 for st in self.cells[staff_id].values() if st.is_work)

    def debt(self, staff_id: int) -> float:
        return self.work_count(staff_id) / self.staff[staff_id].fte

    def _run_length(self, staff_id: int, day: date, predicate) -> int:
        days = self.cells[staff_id]
        length = 1
        cursor = day - ONE_DAY
        while cursor in days and predicate(days[cursor]):
            length += 1
            cursor -= ONE_DAY
        cursor = day + ONE_DAY
        while cursor in days and predicate(days[cursor]):
            length += 1
            cursor += ONE_DAY
        return length

    def fits(self, staff_id: int, day: date, shift_type: ShiftType, params: OptimizationParameters) -> bool:
        """Would placing ``shift_type`` on ``day`` keep this staff member within the rules?"""
        if is_forbidden_transition(self.get(staff_id, day - ONE_DAY), shift_type):
            return False
        following = self.get(staff_id, day + ONE_DAY)
        if following is not None and is_forbidden_transition(shift_type, following):
            return False
        if not shift_type.is_work:
            return True
        if self._run_length(staff_id, day, lambda st: st.is_work) > params.max_consecutive_work_days:
            return False
        if (
            shift_type is ShiftType.NIGHT
            and params.max_consecutive_nights is not None
            and self._run_length(staff_id, day, lambda st: st is ShiftType.NIGHT) > params.max_consecutive_nights
        ):
            return False
        return True

    def try_swap(self, a: int, b: int, day: date, params: OptimizationParameters) -> bool:
        """Exchange the shifts of staff ``a`` and ``b`` on ``day`` if both stay valid."""
        if not (self.movable(a, day) and self.movable(b, day)):
            return False
        shift_a, shift_b = self.cells[a][day], self.cells[b][day]
        # Check each side against the other's shift with the swap applied
        self.cells[a][day], self.cells[b][day] = shift_b, shift_a
        if self.fits(a, day, shift_b, params) and self.fits(b, day, shift_a, params):
            return True
        self.cells[a][day], self.cells[b][day] = shift_a, shift_b
        return False


def _repair_transitions(grid: _Grid, params: OptimizationParameters) -> int:
    swaps = 0
    for staff_id in grid.staff_ids():
        for day in sorted(grid.cells[staff_id]):
            if not (
                grid.get(staff_id, day) is ShiftType.MORNING
                and is_forbidden_transition(grid.get(staff_id, day - ONE_DAY), ShiftType.MORNING)
            ):
                continue
            for other in grid.staff_ids():
                if other != staff_id and grid.get(other, day) is ShiftType.AFTERNOON:
                    if grid.try_swap(staff_id, other, day, params):
                        swaps += 1
                        break
    return swaps


def _balance_workload(grid: _Grid, params: OptimizationParameters) -> int:
    swaps = 0
    ids = grid.staff_ids()
    if len(ids) < 2:
        return 0
    budget = sum(len(grid.cells[sid]) for sid in ids)
    while swaps < budget:
        debts = {sid: grid.debt(sid) for sid in ids}
        avg = sum(debts.values()) / len(debts)
        over = sorted((sid for sid in ids if debts[sid] > avg + BALANCE_MARGIN), key=lambda s: (-debts[s], s))
        under = sorted((sid for sid in ids if debts[sid] < avg - BALANCE_MARGIN), key=lambda s: (debts[s], s))
        if not over or not under:
            break
        if not _move_one_shift(grid, over, under, params):
            break
        swaps += 1
    return swaps


def _move_one_shift(grid: _Grid, over: List[int], under: List[int], params: OptimizationParameters) -> bool:
    for heavy in over:
        for day in sorted(grid.cells[heavy]):
            if not grid.get(heavy, day).is_work:
                continue
            for light in under:
                if grid.get(light, day) is ShiftType.REST and grid.try_swap(heavy, light, day, params):
                    return True
    return False


def _balance_weekends(grid: _Grid, params: OptimizationParameters) -> int:
    swaps = 0
    for saturday in grid.dates():
        if saturday.weekday() != 5:
            continue
        sunday = saturday + ONE_DAY
        workers = [
            sid for sid in grid.staff_ids()
            if all((grid.get(sid, d) or ShiftType.REST).is_work for d in (saturday, sunday))
        ]
        resters = [
            sid for sid in grid.staff_ids()
            if all(grid.get(sid, d) is ShiftType.REST for d in (saturday, sunday))
        ]
        for worker in workers:
            for rester in list(resters):
                if grid.try_swap(worker, rester, saturday, params):
                    resters.remove(rester)
                    swaps += 1
                    break
    return swaps


def optimize_schedule(
    assignments: Iterable[ShiftAssignment],
    staff_pool: Iterable[StaffMember],
    params: OptimizationParameters | None = None,
) -> List[ShiftAssignment]:
    """
    Improve an existing roster by swapping shifts between staff on the same date.

    Passes, each enabled by its flag:
    1. ``avoid_night_after_morning``: a Morning right after a Night is swapped
       with another staff member's Afternoon
    2. ``balance_workload``: staff more than two shifts above the average debt
       hand a work shift to staff more than two below it who rest that day
    3. ``optimize_weekends``: staff working both weekend days trade their
       Saturday with staff resting both days

    VACATION entries, manually assigned entries, double-booked dates and
    staff outside ``staff_pool`` are never touched. No swap is applied if it
    would create a Night->Morning transition or break a consecutive limit.
    Per-date coverage is unchanged since every swap stays within one date.

    Returns:
        A new list in the input order; the input is not modified
    """
    params = validate_parameters(params)
    original = list(assignments)
    staff = {m.staff_id: m for m in staff_pool}
    grid = _Grid(original, staff)

    if params.avoid_night_after_morning:
        _repair_transitions(grid, params)
    if params.balance_workload:
        _balance_workload(grid, params)
    if params.optimize_weekends:
        _balance_weekends(grid, params)

    result: List[ShiftAssignment] = []
    for a in original:
        if (a.staff_id, a.date) in grid.locked:
            result.append(a)
            continue
        updated = grid.get(a.staff_id, a.date)
        result.append(a if updated is a.shift_type else replace(a, shift_type=updated))
    return result
