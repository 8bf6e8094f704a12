"""Constraint set: parameter validation and the rule predicates shared by the engine,
the optimizer and the conflict checker."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Tuple

from ward_scheduler.domain.types import SHIFT_ORDER, DateRange, OptimizationParameters, ShiftType
from ward_scheduler.errors import DateRangeTooLargeError, ValidationError

_BOOL_FIELDS = (
    "consider_preferences",
    "balance_workload",
    "avoid_night_after_morning",
    "respect_seniority",
    "optimize_weekends",
    "avoid_isolated_work_days",
)


def validate_date_range(start: date, end: date, max_days: int = 31) -> DateRange:
    """
    Build a ``DateRange`` for a generation run.

    Raises:
        DateRangeInvertedError: If start is after end
        DateRangeTooLargeError: If the range spans more than ``max_days`` days
    """
    date_range = DateRange(start, end)
    if len(date_range) > max_days:
        raise DateRangeTooLargeError(
            f"Date range {start.isoformat()}..{end.isoformat()} spans {len(date_range)} days "
            f"(maximum {max_days})"
        )
    return date_range


def validate_parameters(params: OptimizationParameters | None) -> OptimizationParameters:
    """
    Check optimization parameters and return them (defaults when ``None``).

    Raises:
        ValidationError: If any limit is out of range or a flag is not a bool
    """
    if params is None:
        return OptimizationParameters()

    for name in _BOOL_FIELDS:
        if not isinstance(getattr(params, name), bool):
            raise ValidationError(f"Parameter {name} must be a boolean, got {getattr(params, name)!r}")

    for name in ("min_consecutive_rest_days", "max_consecutive_work_days"):
        value = getattr(params, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Parameter {name} must be an integer, got {value!r}")

    if params.min_consecutive_rest_days < 0:
        raise ValidationError(
            f"min_consecutive_rest_days must be >= 0, got {params.min_consecutive_rest_days}"
        )
    if params.max_consecutive_work_days < 1:
        raise ValidationError(
            f"max_consecutive_work_days must be >= 1, got {params.max_consecutive_work_days}"
        )
    if params.max_consecutive_nights is not None and (
        isinstance(params.max_consecutive_nights, bool)
        or not isinstance(params.max_consecutive_nights, int)
        or params.max_consecutive_nights < 1
    ):
        raise ValidationError(
            f"max_consecutive_nights must be a positive integer or null, got {params.max_consecutive_nights!r}"
        )
    return params


def is_forbidden_transition(previous: ShiftType | None, current: ShiftType) -> bool:
    """Night followed by Morning on the next day."""
    return previous is ShiftType.NIGHT and current is ShiftType.MORNING


def work_runs(days: Iterable[Tuple[date, ShiftType]]) -> List[Tuple[date, date, int]]:
    """
    Find runs of consecutive work days.

    Args:
        days: (date, shift type) pairs for one staff member, in any order

    Returns:
        List of (first day, last day, length) for every run of work shifts on
        consecutive calendar days
    """
    runs: List[Tuple[date, date, int]] = []
    run_start: date | None = None
    prev_day: date | None = None
    length = 0
    for day, shift_type in sorted(days, key=lambda pair: (pair[0], SHIFT_ORDER.index(pair[1]))):
        if prev_day is not None and day == prev_day:
            # duplicate date; counted once
            continue
        contiguous = prev_day is not None and (day - prev_day).days == 1
        if shift_type.is_work:
            if run_start is not None and contiguous:
                length += 1
            else:
                if run_start is not None:
                    runs.append((run_start, prev_day, length))
                run_start, length = day, 1
        elif run_start is not None:
            runs.append((run_start, prev_day, length))
            run_start, length = None, 0
        prev_day = day
    if run_start is not None:
        runs.append((run_start, prev_day, length))
    return runs
