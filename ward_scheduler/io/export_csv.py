"""CSV export utilities for rosters and staff."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, List

import pandas as pd
from sqlalchemy.orm import Session

from ward_scheduler.domain.repositories import ShiftRepository, StaffRepository
from ward_scheduler.domain.types import ShiftAssignment

ASSIGNMENT_COLUMNS = ["staff_id", "date", "shift_type", "manually_assigned"]


def assignments_frame(assignments: Iterable[ShiftAssignment]) -> pd.DataFrame:
    """Flat DataFrame with one row per assignment, shift type as letter code."""
    rows = [
        {
            "staff_id": a.staff_id,
            "date": a.date.isoformat(),
            "shift_type": a.shift_type.value,
            "manually_assigned": a.manually_assigned,
        }
        for a in assignments
    ]
    return pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)


def write_assignments_csv(csv_path: str | Path, assignments: Iterable[ShiftAssignment]) -> int:
    """Write assignments in the same layout ``read_assignments_csv`` reads."""
    df = assignments_frame(assignments)
    df.to_csv(csv_path, index=False)
    return len(df)


def write_roster_grid_csv(csv_path: str | Path, assignments: Iterable[ShiftAssignment]) -> int:
    """
    Write the printable roster: one row per staff member, one column per date,
    letter codes in the cells.

    Returns:
        Number of staff rows written
    """
    df = assignments_frame(assignments)
    if df.empty:
        pd.DataFrame(columns=["staff_id"]).to_csv(csv_path, index=False)
        return 0
    grid = df.groupby(["staff_id", "date"])["shift_type"].first().unstack(fill_value="")
    grid = grid.sort_index().reindex(columns=sorted(grid.columns))
    grid.to_csv(csv_path)
    return len(grid)


def export_shifts_csv(
    session: Session,
    csv_path: str | Path,
    start: date | None = None,
    end: date | None = None,
    grid: bool = False,
) -> int:
    """
    Export stored shifts to CSV.

    Args:
        session: Database session
        csv_path: Output path
        start: First date to export (default: earliest stored)
        end: Last date to export (default: latest stored)
        grid: Write the staff x date layout instead of one row per shift

    Returns:
        Number of rows written
    """
    start = start or date.min
    end = end or date.max
    assignments: List[ShiftAssignment] = [
        row.to_domain() for row in ShiftRepository.get_by_range(session, start, end)
    ]
    if grid:
        count = write_roster_grid_csv(csv_path, assignments)
    else:
        count = write_assignments_csv(csv_path, assignments)
    print(f"[INFO] Exported {count} rows to {csv_path}")
    return count


def export_staff_csv(session: Session, csv_path: str | Path) -> int:
    """Export all staff rows to CSV in the layout ``import_staff_csv`` reads."""
    rows = [
        {
            "staff_id": s.staff_id,
            "first_name": s.first_name,
            "last_name": s.last_name,
            "role": s.role,
            "working_percentage": s.working_percentage,
            "years_of_experience": s.years_of_experience,
            "available_for_extra_shifts": s.available_for_extra_shifts,
            "is_active": s.is_active,
        }
        for s in StaffRepository.get_all(session)
    ]
    pd.DataFrame(rows).to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(rows)} staff to {csv_path}")
    return len(rows)
