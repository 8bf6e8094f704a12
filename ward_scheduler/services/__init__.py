"""Services for roster lookups, rule checks and scoring."""

from .absences import AbsenceIndex
from .conflicts import ConflictDescriptor, ConflictKind, check_conflicts
from .constraints import is_forbidden_transition, validate_date_range, validate_parameters, work_runs
from .roster import RosterView
from .scoring import ScheduleQualityMetrics, analyze_quality, compute_quality, summarize_assignments

__all__ = [
    "AbsenceIndex",
    "RosterView",
    "ConflictDescriptor",
    "ConflictKind",
    "check_conflicts",
    "is_forbidden_transition",
    "validate_date_range",
    "validate_parameters",
    "work_runs",
    "ScheduleQualityMetrics",
    "analyze_quality",
    "compute_quality",
    "summarize_assignments",
]
