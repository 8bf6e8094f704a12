"""Flat records consumed and produced by the scheduling engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Iterator, Mapping

from ward_scheduler.errors import DateRangeInvertedError, UnknownRoleError, ValidationError


class Role(str, Enum):
    """Staff role used to filter a generation run."""

    NURSE = "NURSE"
    OSS = "OSS"
    HEAD_NURSE = "HEAD_NURSE"

    @classmethod
    def parse(cls, value: "Role | str") -> "Role":
        """Parse a role name (``nurse``, ``OSS``, ``HeadNurse``, ``head-nurse``...)."""
        if isinstance(value, Role):
            return value
        raw = str(value).strip()
        # HeadNurse -> Head_Nurse before upper-casing
        chars = []
        for i, ch in enumerate(raw):
            if ch.isupper() and i > 0 and raw[i - 1].islower():
                chars.append("_")
            chars.append(ch)
        key = "".join(chars).upper().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            raise UnknownRoleError(f"Unknown staff role: {value!r}") from None


class ShiftType(str, Enum):
    """Shift kinds; the value is the one-letter code used on printed rosters."""

    MORNING = "M"
    AFTERNOON = "P"
    NIGHT = "N"
    REST = "R"
    VACATION = "F"

    @property
    def is_work(self) -> bool:
        return self in WORK_SHIFTS

    @classmethod
    def parse(cls, value: "ShiftType | str") -> "ShiftType":
        """Accept either the letter code (``M``) or the name (``morning``)."""
        if isinstance(value, ShiftType):
            return value
        raw = str(value).strip().upper()
        if raw in cls.__members__:
            return cls[raw]
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {value!r}") from None


WORK_SHIFTS = frozenset({ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.NIGHT})

# Order used wherever shift types are listed (totals, reports)
SHIFT_ORDER = (
    ShiftType.MORNING,
    ShiftType.AFTERNOON,
    ShiftType.NIGHT,
    ShiftType.REST,
    ShiftType.VACATION,
)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise DateRangeInvertedError(
                f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __iter__(self) -> Iterator[date]:
        for offset in range(len(self)):
            yield self.start + timedelta(days=offset)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end


@dataclass(frozen=True)
class StaffMember:
    """Staff member snapshot for the duration of one generation run."""

    staff_id: int
    role: Role
    working_percentage: int = 100
    years_of_experience: int = 0
    available_for_extra_shifts: bool = False
    name: str = ""

    def __post_init__(self):
        if not 1 <= self.working_percentage <= 100:
            raise ValidationError(
                f"Staff {self.staff_id}: working percentage must be within 1-100, got {self.working_percentage}"
            )
        if self.years_of_experience < 0:
            raise ValidationError(
                f"Staff {self.staff_id}: years of experience cannot be negative"
            )

    @property
    def fte(self) -> float:
        """Part-time ratio as a fraction of a full-time contract."""
        return self.working_percentage / 100.0


@dataclass(frozen=True)
class Absence:
    """Approved time off, inclusive on both ends."""

    staff_id: int
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValidationError(
                f"Absence for staff {self.staff_id} starts after it ends: "
                f"{self.start_date.isoformat()} > {self.end_date.isoformat()}"
            )

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class ShiftAssignment:
    """One staff member's shift on one date."""

    staff_id: int
    date: date
    shift_type: ShiftType
    manually_assigned: bool = False

    @property
    def is_work(self) -> bool:
        return self.shift_type.is_work


_CAMEL_ALIASES = {
    "minConsecutiveRestDays": "min_consecutive_rest_days",
    "maxConsecutiveWorkDays": "max_consecutive_work_days",
    "considerPreferences": "consider_preferences",
    "balanceWorkload": "balance_workload",
    "avoidNightAfterMorning": "avoid_night_after_morning",
    "respectSeniority": "respect_seniority",
    "optimizeWeekends": "optimize_weekends",
    "avoidIsolatedWorkDays": "avoid_isolated_work_days",
    "maxConsecutiveNights": "max_consecutive_nights",
}


@dataclass(frozen=True)
class OptimizationParameters:
    """Per-run tuning of the allocator. Validate with ``validate_parameters``."""

    min_consecutive_rest_days: int = 2
    max_consecutive_work_days: int = 7
    consider_preferences: bool = False
    balance_workload: bool = True
    avoid_night_after_morning: bool = True
    respect_seniority: bool = False
    optimize_weekends: bool = True
    avoid_isolated_work_days: bool = True
    max_consecutive_nights: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OptimizationParameters":
        """Build from a request/config mapping; camelCase keys are accepted."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
