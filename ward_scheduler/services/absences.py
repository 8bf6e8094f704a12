"""Per-day lookup of approved absences."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set

from ward_scheduler.domain.types import Absence, DateRange


class AbsenceIndex:
    """Index of absences by staff id, queried one day at a time."""

    def __init__(self, absences: Iterable[Absence], date_range: DateRange | None = None):
        self._by_staff: Dict[int, List[Absence]] = defaultdict(list)
        for absence in absences:
            if date_range is not None and (
                absence.end_date < date_range.start or absence.start_date > date_range.end
            ):
                continue
            self._by_staff[absence.staff_id].append(absence)
        for staff_absences in self._by_staff.values():
            staff_absences.sort(key=lambda a: (a.start_date, a.end_date))

    def covering(self, staff_id: int, day: date) -> Absence | None:
        """Return the absence covering ``day`` for this staff member, if any."""
        for absence in self._by_staff.get(staff_id, ()):
            if absence.covers(day):
                return absence
            if absence.start_date > day:
                break
        return None

    def is_absent(self, staff_id: int, day: date) -> bool:
        return self.covering(staff_id, day) is not None

    def absent_on(self, day: date, staff_ids: Iterable[int] | None = None) -> Set[int]:
        """Staff ids absent on ``day``, optionally restricted to ``staff_ids``."""
        candidates = self._by_staff.keys() if staff_ids is None else staff_ids
        return {sid for sid in candidates if self.is_absent(sid, day)}

    def for_staff(self, staff_id: int) -> List[Absence]:
        return list(self._by_staff.get(staff_id, ()))

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_staff.values())
