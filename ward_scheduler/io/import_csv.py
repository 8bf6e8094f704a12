"""CSV import utilities to load staff, vacations and rosters."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
from sqlalchemy.orm import Session

from ward_scheduler.domain.models import Staff, Vacation
from ward_scheduler.domain.repositories import AbsenceRepository, StaffRepository
from ward_scheduler.domain.types import Absence, Role, ShiftAssignment, ShiftType, StaffMember
from ward_scheduler.errors import ValidationError

_TRUE_VALUES = ["TRUE", "T", "1", "1.0", "YES", "Y"]


def _as_bool(value, default: bool = False) -> bool:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    return str(value).strip().upper() in _TRUE_VALUES


def _read(csv_path: str | Path, required: List[str]) -> pd.DataFrame:
    df = pd.read_csv(csv_path)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValidationError(f"{csv_path}: missing required columns {missing}")
    return df


def read_staff_csv(csv_path: str | Path) -> List[StaffMember]:
    """
    Read staff records from CSV without touching the database.

    Required columns: staff_id, role. Optional: first_name, last_name,
    working_percentage, years_of_experience, available_for_extra_shifts.
    """
    df = _read(csv_path, ["staff_id", "role"])
    staff = []
    for _, row in df.iterrows():
        name = " ".join(
            str(row[c]) for c in ("first_name", "last_name") if c in df.columns and pd.notna(row[c])
        )
        staff.append(
            StaffMember(
                staff_id=int(row["staff_id"]),
                role=Role.parse(row["role"]),
                working_percentage=int(row["working_percentage"]) if pd.notna(row.get("working_percentage")) else 100,
                years_of_experience=int(row["years_of_experience"]) if pd.notna(row.get("years_of_experience")) else 0,
                available_for_extra_shifts=_as_bool(row.get("available_for_extra_shifts")),
                name=name,
            )
        )
    return staff


def read_absences_csv(csv_path: str | Path) -> List[Absence]:
    """
    Read absences from CSV (staff_id, start_date, end_date[, approved]).

    Rows with an ``approved`` column set to false are skipped.
    """
    df = _read(csv_path, ["staff_id", "start_date", "end_date"])
    df["start_date"] = pd.to_datetime(df["start_date"]).dt.date
    df["end_date"] = pd.to_datetime(df["end_date"]).dt.date
    if "approved" in df.columns:
        df = df[df["approved"].map(lambda v: _as_bool(v, default=True))]
    return [
        Absence(int(row["staff_id"]), row["start_date"], row["end_date"])
        for _, row in df.iterrows()
    ]


def read_assignments_csv(csv_path: str | Path) -> List[ShiftAssignment]:
    """
    Read a roster from CSV (staff_id, date, shift_type[, manually_assigned]).

    ``shift_type`` accepts either the letter code (M/P/N/R/F) or the name.
    """
    df = _read(csv_path, ["staff_id", "date", "shift_type"])
    df["date"] = pd.to_datetime(df["date"]).dt.date
    return [
        ShiftAssignment(
            staff_id=int(row["staff_id"]),
            date=row["date"],
            shift_type=ShiftType.parse(row["shift_type"]),
            manually_assigned=_as_bool(row.get("manually_assigned")),
        )
        for _, row in df.iterrows()
    ]


def import_staff_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import staff from CSV into database.

    Args:
        session: Database session
        csv_path: Path to staff CSV

    Returns:
        Number of staff imported
    """
    df = _read(csv_path, ["staff_id", "role"])

    # Validate roles up front so nothing is half-imported
    df["role"] = df["role"].map(lambda r: Role.parse(r).value)

    rows = []
    for _, row in df.iterrows():
        member = Staff(
            staff_id=int(row["staff_id"]),
            first_name=str(row["first_name"]) if pd.notna(row.get("first_name")) else "",
            last_name=str(row["last_name"]) if pd.notna(row.get("last_name")) else "",
            role=row["role"],
            working_percentage=int(row["working_percentage"]) if pd.notna(row.get("working_percentage")) else 100,
            years_of_experience=int(row["years_of_experience"]) if pd.notna(row.get("years_of_experience")) else 0,
            available_for_extra_shifts=_as_bool(row.get("available_for_extra_shifts")),
            is_active=_as_bool(row.get("is_active"), default=True),
        )
        # Reject invalid contracts before insert
        member.to_domain()
        rows.append(member)

    # Bulk insert
    StaffRepository.bulk_create(session, rows)

    print(f"[INFO] Imported {len(rows)} staff from {csv_path}")
    return len(rows)


def import_vacations_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import vacations from CSV into database.

    Args:
        session: Database session
        csv_path: Path to vacations CSV (staff_id, start_date, end_date,
            approved, reason)

    Returns:
        Number of vacation records imported
    """
    df = _read(csv_path, ["staff_id", "start_date", "end_date"])

    # Convert dates
    df["start_date"] = pd.to_datetime(df["start_date"]).dt.date
    df["end_date"] = pd.to_datetime(df["end_date"]).dt.date

    vacations = []
    for _, row in df.iterrows():
        vacation = Vacation(
            staff_id=int(row["staff_id"]),
            start_date=row["start_date"],
            end_date=row["end_date"],
            approved=_as_bool(row.get("approved"), default=True),
            reason=str(row["reason"]) if pd.notna(row.get("reason")) else None,
        )
        # Reject inverted ranges before insert
        vacation.to_domain()
        vacations.append(vacation)

    # Bulk insert
    AbsenceRepository.bulk_create(session, vacations)

    print(f"[INFO] Imported {len(vacations)} vacations from {csv_path}")
    return len(vacations)
