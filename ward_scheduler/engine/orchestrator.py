"""Orchestrator - pulls staff and absences, runs the engine, scores and persists a roster."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from ward_scheduler.config import SchedulerConfig
from ward_scheduler.domain.models import ScheduleGeneration
from ward_scheduler.domain.repositories import (
    AbsenceRepository,
    ScheduleGenerationRepository,
    ShiftRepository,
    StaffRepository,
)
from ward_scheduler.domain.types import DateRange, OptimizationParameters, Role, ShiftAssignment
from ward_scheduler.services.conflicts import check_conflicts
from ward_scheduler.services.constraints import validate_date_range, validate_parameters
from ward_scheduler.services.scoring import ScheduleQualityMetrics, compute_quality

from .base import BaseAllocator
from .generator import generate_assignments


@dataclass
class ScheduleResult:
    assignments: List[ShiftAssignment]
    metrics: ScheduleQualityMetrics
    generation_id: int | None = None


def generate_schedule(
    session: Session,
    date_range: DateRange | tuple[date, date],
    role: Role | str,
    params: OptimizationParameters | None = None,
    cfg: SchedulerConfig | None = None,
    persist: bool = False,
    allocator: BaseAllocator | None = None,
) -> ScheduleResult:
    """
    Generate, score and optionally store a roster for one staff role.

    Args:
        session: Database session
        date_range: Inclusive range, or a (start, end) tuple
        role: Staff role to roster (``NURSE``, ``OSS``, ``HEAD_NURSE``)
        params: Optimization parameters (defaults from ``cfg`` when omitted)
        cfg: SchedulerConfig
        persist: If True, replace the range for these staff in the database
            and record a ``ScheduleGeneration`` row
        allocator: Optional custom day allocator

    Returns:
        ScheduleResult with the assignments, their metrics and the id of the
        generation record (None when not persisted)

    Raises:
        ValidationError: On an invalid range, role or parameters
        DependencyUnavailable: If the store cannot be read or written
    """
    cfg = cfg or SchedulerConfig()
    role = Role.parse(role)
    if isinstance(date_range, DateRange):
        start, end = date_range.start, date_range.end
    else:
        start, end = date_range
    date_range = validate_date_range(start, end, cfg.max_range_days)
    params = validate_parameters(params if params is not None else cfg.optimization)

    print(
        f"[INFO] Orchestrator: Building {role.value} roster for "
        f"{date_range.start.isoformat()}..{date_range.end.isoformat()} ({len(date_range)} days)"
    )
    started = time.perf_counter()

    staff = StaffRepository.list_by_role(session, role)
    if not staff:
        print(f"[WARN] No active staff with role {role.value}")
    staff_ids = [m.staff_id for m in staff]
    absences = AbsenceRepository.list_for_staff(session, staff_ids, date_range)
    print(f"[INFO] Loaded {len(staff)} staff and {len(absences)} approved absences")

    assignments = generate_assignments(
        date_range, staff, absences, params=params, allocator=allocator, cfg=cfg
    )
    metrics = compute_quality(assignments, staff, cfg.score_weights, cfg.shift_hours)
    elapsed = time.perf_counter() - started
    print(
        f"[OK] Generated {len(assignments)} assignments "
        f"(quality {metrics.overall_quality_score:.1f}/100, {elapsed:.2f}s)"
    )

    generation_id = None
    if persist:
        violations = check_conflicts(assignments, absences, params)
        generation = ScheduleGenerationRepository.add(
            session,
            ScheduleGeneration(
                start_date=date_range.start,
                end_date=date_range.end,
                staff_type=role.value,
                optimization_parameters=json.dumps(params.to_dict()),
                quality_score=metrics.overall_quality_score,
                constraints_violated=len(violations),
                generation_time=elapsed,
            ),
        )
        deleted = ShiftRepository.replace_range(session, date_range, staff_ids, assignments)
        if deleted > 0:
            print(f"[INFO] Deleted {deleted} existing shifts in range")
        print(f"[INFO] Persisted {len(assignments)} shifts to database")
        generation_id = generation.id

    return ScheduleResult(assignments, metrics, generation_id)
