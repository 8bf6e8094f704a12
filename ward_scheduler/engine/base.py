"""Base allocator interface that every day-allocation strategy must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Sequence

from ward_scheduler.domain.types import OptimizationParameters, ShiftType, StaffMember

from .state import RunState


class BaseAllocator(ABC):
    """
    Abstract base class for day allocators.

    An allocator decides the shift of every available staff member on a single
    date. Absent staff are handled by the engine and never passed in.
    """

    name: str | None = None  # Override in subclasses (e.g., "greedy")

    @abstractmethod
    def assign_day(
        self,
        day: date,
        available: Sequence[StaffMember],
        state: RunState,
        params: OptimizationParameters,
    ) -> Dict[int, ShiftType]:
        """
        Allocate shifts for one date.

        Args:
            day: Date being allocated
            available: Staff not covered by an absence on this date
            state: Counters accumulated over the previous dates of the run
            params: Validated optimization parameters

        Returns:
            Dict of staff_id -> ShiftType with exactly one entry per available
            staff member; never VACATION
        """
        pass

    def get_name(self) -> str:
        """Get the allocator's name."""
        return self.name or "UNKNOWN"
