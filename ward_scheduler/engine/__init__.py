"""Roster generation engine with pluggable day allocators."""

from .base import BaseAllocator
from .generator import generate_assignments
from .greedy import GreedyAllocator
from .optimizer import optimize_schedule
from .orchestrator import ScheduleResult, generate_schedule
from .state import RunState, StaffCounters

__all__ = [
    "BaseAllocator",
    "GreedyAllocator",
    "RunState",
    "StaffCounters",
    "generate_assignments",
    "optimize_schedule",
    "generate_schedule",
    "ScheduleResult",
]
