"""Domain records, models and data access layer."""

from .models import Base, ScheduleGeneration, Shift, Staff, Vacation
from .repositories import (
    AbsenceRepository,
    ScheduleGenerationRepository,
    ShiftRepository,
    StaffRepository,
)
from .types import (
    Absence,
    DateRange,
    OptimizationParameters,
    Role,
    ShiftAssignment,
    ShiftType,
    StaffMember,
)

__all__ = [
    "Base",
    "Staff",
    "Vacation",
    "Shift",
    "ScheduleGeneration",
    "StaffRepository",
    "AbsenceRepository",
    "ShiftRepository",
    "ScheduleGenerationRepository",
    "Absence",
    "DateRange",
    "OptimizationParameters",
    "Role",
    "ShiftAssignment",
    "ShiftType",
    "StaffMember",
]
