"""Per-run accumulator threaded through the day loop."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping

from ward_scheduler.domain.types import ShiftType, is_weekend


@dataclass(frozen=True)
class StaffCounters:
    """Running totals for one staff member up to (and including) the last processed day."""

    work_shifts: int = 0
    weekend_shifts: int = 0
    night_shifts: int = 0
    consecutive_work: int = 0
    consecutive_nights: int = 0
    consecutive_rest: int = 0
    last_shift: ShiftType | None = None
    previous_shift: ShiftType | None = None

    def advance(self, shift_type: ShiftType, weekend: bool = False) -> "StaffCounters":
        if shift_type.is_work:
            night = shift_type is ShiftType.NIGHT
            return replace(
                self,
                work_shifts=self.work_shifts + 1,
                weekend_shifts=self.weekend_shifts + (1 if weekend else 0),
                night_shifts=self.night_shifts + (1 if night else 0),
                consecutive_work=self.consecutive_work + 1,
                consecutive_nights=self.consecutive_nights + 1 if night else 0,
                consecutive_rest=0,
                last_shift=shift_type,
                previous_shift=self.last_shift,
            )
        # Rest and Vacation reset both work counters
        return replace(
            self,
            consecutive_work=0,
            consecutive_nights=0,
            consecutive_rest=self.consecutive_rest + 1,
            last_shift=shift_type,
            previous_shift=self.last_shift,
        )


_EMPTY = StaffCounters()


@dataclass(frozen=True)
class RunState:
    """Immutable mapping of staff id to ``StaffCounters``."""

    counters: Mapping[int, StaffCounters]

    @classmethod
    def start(cls, staff_ids: Iterable[int]) -> "RunState":
        return cls(MappingProxyType({sid: _EMPTY for sid in staff_ids}))

    def get(self, staff_id: int) -> StaffCounters:
        return self.counters.get(staff_id, _EMPTY)

    def advance(self, day: date, shifts: Mapping[int, ShiftType]) -> "RunState":
        """Return the state after applying one day's shifts."""
        weekend = is_weekend(day)
        updated = dict(self.counters)
        for staff_id, shift_type in shifts.items():
            updated[staff_id] = self.get(staff_id).advance(shift_type, weekend)
        return RunState(MappingProxyType(updated))
