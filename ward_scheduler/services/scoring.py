"""Schedule quality metrics and the 0-100 quality score."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from ward_scheduler.config import ScoreWeights
from ward_scheduler.domain.types import (
    SHIFT_ORDER,
    ShiftAssignment,
    ShiftType,
    StaffMember,
    is_weekend,
)
from ward_scheduler.services.constraints import is_forbidden_transition

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class ScheduleQualityMetrics:
    shift_totals: Dict[ShiftType, int]
    min_workload: int = 0
    max_workload: int = 0
    avg_workload: float = 0.0
    min_weekend_workload: int = 0
    max_weekend_workload: int = 0
    avg_weekend_workload: float = 0.0
    night_to_morning_violations: int = 0
    workload_balance_score: float = 0.0
    weekend_balance_score: float = 0.0
    transition_score: float = 0.0
    base_distribution_score: float = 0.0
    overall_quality_score: float = 0.0
    # Diagnostics beyond the score itself
    isolated_rest_days: int = 0
    min_night_shifts: int = 0
    max_night_shifts: int = 0
    total_hours: Dict[int, float] = field(default_factory=dict)
    unknown_staff_ids: Tuple[int, ...] = ()
    excluded_assignments: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "shift_totals": {st.name: n for st, n in self.shift_totals.items()},
            "min_workload": self.min_workload,
            "max_workload": self.max_workload,
            "avg_workload": self.avg_workload,
            "min_weekend_workload": self.min_weekend_workload,
            "max_weekend_workload": self.max_weekend_workload,
            "avg_weekend_workload": self.avg_weekend_workload,
            "night_to_morning_violations": self.night_to_morning_violations,
            "workload_balance_score": self.workload_balance_score,
            "weekend_balance_score": self.weekend_balance_score,
            "transition_score": self.transition_score,
            "base_distribution_score": self.base_distribution_score,
            "overall_quality_score": self.overall_quality_score,
            "isolated_rest_days": self.isolated_rest_days,
            "min_night_shifts": self.min_night_shifts,
            "max_night_shifts": self.max_night_shifts,
            "unknown_staff_ids": list(self.unknown_staff_ids),
            "excluded_assignments": self.excluded_assignments,
        }


def _spread(values: List[int]) -> Tuple[int, int, float]:
    if not values:
        return 0, 0, 0.0
    return min(values), max(values), sum(values) / len(values)


def _sorted_for_scan(assignments: List[ShiftAssignment]) -> List[ShiftAssignment]:
    return sorted(assignments, key=lambda a: (a.date, SHIFT_ORDER.index(a.shift_type)))


def _next_day_pairs(assignments: List[ShiftAssignment]):
    ordered = _sorted_for_scan(assignments)
    for current, following in zip(ordered, ordered[1:]):
        if (following.date - current.date).days == 1:
            yield current.shift_type, following.shift_type


def count_night_to_morning(assignments: List[ShiftAssignment]) -> int:
    """Night on one date followed by Morning on the next, for one staff member."""
    return sum(1 for prev, cur in _next_day_pairs(assignments) if is_forbidden_transition(prev, cur))


def count_morning_to_night(assignments: List[ShiftAssignment]) -> int:
    """Morning on one date followed by Night on the next, for one staff member."""
    return sum(
        1
        for prev, cur in _next_day_pairs(assignments)
        if prev is ShiftType.MORNING and cur is ShiftType.NIGHT
    )


def rest_runs(assignments: List[ShiftAssignment]) -> List[int]:
    """
    Lengths of consecutive Rest runs for one staff member, in date order.

    Work, Vacation and a missing date all end a run.
    """
    by_date = {a.date: a.shift_type for a in _sorted_for_scan(assignments)}
    runs: List[int] = []
    current = 0
    previous = None
    for day in sorted(by_date):
        gap = previous is not None and day - previous != ONE_DAY
        if current and (gap or by_date[day] is not ShiftType.REST):
            runs.append(current)
            current = 0
        if by_date[day] is ShiftType.REST:
            current += 1
        previous = day
    if current:
        runs.append(current)
    return runs


def count_isolated_rest_days(assignments: List[ShiftAssignment]) -> int:
    """Rest runs of exactly one day, including those at either end of the roster."""
    return sum(1 for length in rest_runs(assignments) if length == 1)


def compute_quality(
    assignments: Iterable[ShiftAssignment],
    staff_pool: Iterable[StaffMember],
    weights: ScoreWeights | None = None,
    shift_hours: float = 8.0,
) -> ScheduleQualityMetrics:
    """
    Score a finished roster.

    Assignments referencing staff outside ``staff_pool`` are excluded and
    reported in ``unknown_staff_ids``; they never abort the computation.

    Args:
        assignments: Roster to evaluate, in any order
        staff_pool: Staff the roster is meant for
        weights: Component weights (default 30/25/20/25)
        shift_hours: Hours credited per work shift

    Returns:
        ScheduleQualityMetrics with ``overall_quality_score`` in [0, 100]
    """
    weights = weights or ScoreWeights()
    staff_ids = sorted({m.staff_id for m in staff_pool})
    known = set(staff_ids)

    per_staff: Dict[int, List[ShiftAssignment]] = defaultdict(list)
    unknown: set[int] = set()
    excluded = 0
    for assignment in assignments:
        if assignment.staff_id not in known:
            unknown.add(assignment.staff_id)
            excluded += 1
            continue
        per_staff[assignment.staff_id].append(assignment)

    if excluded:
        print(
            f"[WARN] Excluded {excluded} assignments referencing unknown staff ids: "
            f"{sorted(unknown)}"
        )

    totals = {shift_type: 0 for shift_type in SHIFT_ORDER}
    workloads: List[int] = []
    weekend_loads: List[int] = []
    night_loads: List[int] = []
    hours: Dict[int, float] = {}
    violations = 0
    isolated_rest = 0

    for staff_id in staff_ids:
        staff_assignments = per_staff.get(staff_id, [])
        for a in staff_assignments:
            totals[a.shift_type] += 1
        work = [a for a in staff_assignments if a.is_work]
        workloads.append(len(work))
        weekend_loads.append(sum(1 for a in work if is_weekend(a.date)))
        night_loads.append(sum(1 for a in work if a.shift_type is ShiftType.NIGHT))
        hours[staff_id] = len(work) * shift_hours
        violations += count_night_to_morning(staff_assignments)
        isolated_rest += count_isolated_rest_days(staff_assignments)

    min_work, max_work, avg_work = _spread(workloads)
    min_weekend, max_weekend, avg_weekend = _spread(weekend_loads)
    min_night, max_night, _ = _spread(night_loads)

    if avg_work > 0:
        workload_score = weights.workload_balance * (1 - (max_work - min_work) / avg_work)
    else:
        workload_score = weights.workload_balance
    weekend_score = weights.weekend_balance * (
        1 - (max_weekend - min_weekend) / max(1.0, avg_weekend)
    )
    transition_score = weights.transition * (
        1 - min(1.0, violations / max(1, len(staff_ids)))
    )
    base_score = weights.base_distribution

    overall = workload_score + weekend_score + transition_score + base_score
    overall = max(0.0, min(100.0, overall))

    return ScheduleQualityMetrics(
        shift_totals=totals,
        min_workload=min_work,
        max_workload=max_work,
        avg_workload=avg_work,
        min_weekend_workload=min_weekend,
        max_weekend_workload=max_weekend,
        avg_weekend_workload=avg_weekend,
        night_to_morning_violations=violations,
        workload_balance_score=workload_score,
        weekend_balance_score=weekend_score,
        transition_score=transition_score,
        base_distribution_score=base_score,
        overall_quality_score=overall,
        isolated_rest_days=isolated_rest,
        min_night_shifts=min_night,
        max_night_shifts=max_night,
        total_hours=hours,
        unknown_staff_ids=tuple(sorted(unknown)),
        excluded_assignments=excluded,
    )


PREFERENCE_SCORE = 7.5


def _clamp(score: float) -> float:
    return max(0.0, min(10.0, score))


def _deviation_score(counts: List[int], max_allowed: float) -> float:
    """10 for identical counts, falling linearly to 0 at ``max_allowed`` standard deviation."""
    if not counts or max_allowed <= 0:
        return 10.0
    std = float(pd.Series(counts).std(ddof=0))
    return _clamp(10 * (1 - min(1.0, std / max_allowed)))


def analyze_quality(
    assignments: Iterable[ShiftAssignment],
    staff_pool: Iterable[StaffMember],
) -> Dict[str, float]:
    """
    Rate a roster on six 0-10 scales and average them into ``overall_score``.

    - workload_distribution: spread of work shifts per staff member,
      0 once the standard deviation reaches half the staff count
    - consecutive_rest_days: 10 minus 0.5 per single-day rest run
    - shift_sequence: 10 minus 1.0 per Morning->Night and 0.5 per
      Night->Morning on consecutive days
    - weekend_balance: spread of Saturday/Sunday weekends worked, 0 once
      the standard deviation reaches half the number of weekends
    - personal_preferences: fixed at 7.5, preferences are not recorded yet
    - night_shift_distribution: spread of Night shifts, 0 once the standard
      deviation reaches max(1, half the average nights per staff member)

    Assignments for staff outside ``staff_pool`` are ignored.
    """
    staff_ids = sorted({m.staff_id for m in staff_pool})
    known = set(staff_ids)
    per_staff: Dict[int, List[ShiftAssignment]] = defaultdict(list)
    for assignment in assignments:
        if assignment.staff_id in known:
            per_staff[assignment.staff_id].append(assignment)

    work_counts = [sum(1 for a in per_staff[sid] if a.is_work) for sid in staff_ids]
    night_counts = [
        sum(1 for a in per_staff[sid] if a.shift_type is ShiftType.NIGHT) for sid in staff_ids
    ]
    isolated = sum(count_isolated_rest_days(per_staff[sid]) for sid in staff_ids)
    morning_to_night = sum(count_morning_to_night(per_staff[sid]) for sid in staff_ids)
    night_to_morning = sum(count_night_to_morning(per_staff[sid]) for sid in staff_ids)

    # A weekend counts only when both its Saturday and Sunday are in the roster
    dates = {a.date for sid in staff_ids for a in per_staff[sid]}
    saturdays = sorted(d for d in dates if d.weekday() == 5 and d + ONE_DAY in dates)
    weekend_counts = []
    for sid in staff_ids:
        worked = {a.date for a in per_staff[sid] if a.is_work}
        weekend_counts.append(
            sum(1 for sat in saturdays if sat in worked or sat + ONE_DAY in worked)
        )

    nights_per_staff = sum(night_counts) / len(staff_ids) if staff_ids else 0.0

    metrics = {
        "workload_distribution": _deviation_score(work_counts, len(staff_ids) / 2),
        "consecutive_rest_days": _clamp(10.0 - 0.5 * isolated),
        "shift_sequence": _clamp(10.0 - 1.0 * morning_to_night - 0.5 * night_to_morning),
        "weekend_balance": _deviation_score(weekend_counts, len(saturdays) / 2),
        "personal_preferences": PREFERENCE_SCORE,
        "night_shift_distribution": _deviation_score(night_counts, max(1.0, nights_per_staff / 2)),
    }
    metrics["overall_score"] = sum(metrics.values()) / len(metrics)
    return metrics


def summarize_assignments(assignments: Iterable[ShiftAssignment]) -> str:
    """Plain-text coverage and workload report."""
    rows = [
        {"staff_id": a.staff_id, "date": a.date.isoformat(), "shift": a.shift_type.name}
        for a in assignments
    ]
    if not rows:
        return "No assignments."
    df = pd.DataFrame(rows)

    coverage = df.groupby(["date", "shift"]).size().unstack(fill_value=0)
    coverage = coverage.reindex(columns=[st.name for st in SHIFT_ORDER], fill_value=0)
    work = df[df["shift"].isin([st.name for st in SHIFT_ORDER if st.is_work])]
    per_staff = (
        work.groupby("staff_id").size()
        .reindex(sorted(df["staff_id"].unique()), fill_value=0)
        .sort_values(ascending=False, kind="stable")
    )

    lines = ["Coverage per day per shift:"]
    lines.append(coverage.to_string())
    lines.append("")
    lines.append("Work shifts per staff member:")
    lines.append(per_staff.to_string())
    return "\n".join(lines)
