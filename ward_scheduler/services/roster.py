"""Immutable snapshot of the staff taking part in a generation run."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

from ward_scheduler.domain.types import StaffMember
from ward_scheduler.errors import ValidationError


class RosterView:
    """
    Read-only view over the staff pool, ordered by staff id.

    Built once per run from whatever the roster collaborator returned.
    Duplicate ids are rejected since every later lookup is keyed by id.
    """

    def __init__(self, staff: Iterable[StaffMember]):
        by_id: Dict[int, StaffMember] = {}
        for member in staff:
            if member.staff_id in by_id:
                raise ValidationError(f"Duplicate staff id in roster: {member.staff_id}")
            by_id[member.staff_id] = member
        self._members: Tuple[StaffMember, ...] = tuple(by_id[k] for k in sorted(by_id))

    @property
    def ids(self) -> List[int]:
        return [m.staff_id for m in self._members]

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[StaffMember]:
        return iter(self._members)

    def __repr__(self) -> str:
        return f"<RosterView(size={len(self)})>"
