"""Greedy proportional allocator: lowest fairness debt gets the earliest shift."""

from __future__ import annotations

import math
from datetime import date
from typing import Dict, List, Sequence, Tuple

from ward_scheduler.config import ShiftSplit
from ward_scheduler.domain.types import OptimizationParameters, ShiftType, StaffMember, is_weekend
from ward_scheduler.services.constraints import is_forbidden_transition

from .base import BaseAllocator
from .state import RunState, StaffCounters

FILL_ORDER = (ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.NIGHT)


class GreedyAllocator(BaseAllocator):
    """
    Allocates one day by ranking available staff on fairness debt and filling
    Morning, Afternoon and Night quotas in that order. Whoever is left rests.

    Hard rules applied on top of the ranking:
    - staff at the consecutive work-day limit are forced to rest
    - with ``avoid_night_after_morning``, nobody coming off a Night gets Morning
    - with ``max_consecutive_nights``, nobody at the limit gets another Night
    """

    name = "greedy"

    def __init__(self, split: ShiftSplit | None = None):
        self.split = split or ShiftSplit()

    def quotas(self, available_count: int) -> Dict[ShiftType, int]:
        """Seats per work shift for a day with ``available_count`` staff."""
        # round() first: 10 * 0.3 is 3.0000000000000004 in floating point
        return {
            shift_type: math.ceil(round(available_count * fraction, 9))
            for shift_type, fraction in self.split.as_map().items()
        }

    @staticmethod
    def debt(member: StaffMember, counters: StaffCounters, params: OptimizationParameters) -> float:
        """Work shifts so far, scaled up for part-time staff."""
        if not params.balance_workload:
            return float(counters.work_shifts)
        return counters.work_shifts / member.fte

    def rank_key(
        self,
        member: StaffMember,
        counters: StaffCounters,
        day: date,
        params: OptimizationParameters,
    ) -> Tuple:
        """Sort key; lower ranks are served first."""
        isolated = 0
        if (
            params.avoid_isolated_work_days
            and counters.consecutive_work == 1
            and counters.previous_shift is not None
            and not counters.previous_shift.is_work
        ):
            # yesterday's work day sits right after a rest day
            isolated = -1

        rest = 0
        if params.min_consecutive_rest_days > 0 and counters.consecutive_rest > 0:
            rest = 1 if counters.consecutive_rest < params.min_consecutive_rest_days else -1

        weekend = 0.0
        if params.optimize_weekends and is_weekend(day):
            weekend = counters.weekend_shifts / member.fte

        seniority = -member.years_of_experience if params.respect_seniority else 0
        preference = 1 if params.consider_preferences and not member.available_for_extra_shifts else 0

        return (
            self.debt(member, counters, params),
            isolated,
            rest,
            weekend,
            seniority,
            preference,
            member.staff_id,
        )

    @staticmethod
    def _allowed(shift_type: ShiftType, counters: StaffCounters, params: OptimizationParameters) -> bool:
        if params.avoid_night_after_morning and is_forbidden_transition(counters.last_shift, shift_type):
            return False
        if (
            shift_type is ShiftType.NIGHT
            and params.max_consecutive_nights is not None
            and counters.consecutive_nights >= params.max_consecutive_nights
        ):
            return False
        return True

    @staticmethod
    def _swap_out_of_morning(
        ranked: List[StaffMember], block: int, state: RunState
    ) -> List[StaffMember]:
        """Swap anyone coming off a Night out of the Morning block."""
        order = list(ranked)
        for i in range(block):
            if state.get(order[i].staff_id).last_shift is not ShiftType.NIGHT:
                continue
            for j in range(block, len(order)):
                if state.get(order[j].staff_id).last_shift is not ShiftType.NIGHT:
                    order[i], order[j] = order[j], order[i]
                    break
        return order

    def assign_day(
        self,
        day: date,
        available: Sequence[StaffMember],
        state: RunState,
        params: OptimizationParameters,
    ) -> Dict[int, ShiftType]:
        shifts: Dict[int, ShiftType] = {}

        # 1. Forced rest at the consecutive work-day limit
        eligible: List[StaffMember] = []
        for member in available:
            if state.get(member.staff_id).consecutive_work >= params.max_consecutive_work_days:
                shifts[member.staff_id] = ShiftType.REST
            else:
                eligible.append(member)

        # 2. Rank by debt, then the soft preferences, then id
        ranked = sorted(
            eligible,
            key=lambda m: self.rank_key(m, state.get(m.staff_id), day, params),
        )

        # 3. Quotas come from everyone available, forced rests included
        remaining = self.quotas(len(available))
        if params.avoid_night_after_morning:
            block = min(remaining[ShiftType.MORNING], len(ranked))
            ranked = self._swap_out_of_morning(ranked, block, state)

        # 4. Fill Morning, Afternoon, Night in rank order
        for member in ranked:
            counters = state.get(member.staff_id)
            chosen = ShiftType.REST
            for shift_type in FILL_ORDER:
                if remaining[shift_type] > 0 and self._allowed(shift_type, counters, params):
                    chosen = shift_type
                    remaining[shift_type] -= 1
                    break
            shifts[member.staff_id] = chosen

        return shifts
