"""Repository classes for data access."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ward_scheduler.errors import DependencyUnavailable

from .models import ScheduleGeneration, Shift, Staff, Vacation
from .types import Absence, DateRange, Role, ShiftAssignment, StaffMember


class StaffRepository:
    """Repository for staff data access."""

    @staticmethod
    def get_all(session: Session) -> List[Staff]:
        """Get all staff rows."""
        return session.query(Staff).order_by(Staff.staff_id).all()

    @staticmethod
    def get_by_id(session: Session, staff_id: int) -> Optional[Staff]:
        """Get staff row by ID."""
        return session.query(Staff).filter(Staff.staff_id == staff_id).first()

    @staticmethod
    def list_by_role(session: Session, role: Role | str) -> List[StaffMember]:
        """
        Active staff with a given role, as engine records.

        Raises:
            UnknownRoleError: If ``role`` is not a known staff role
            DependencyUnavailable: If the store cannot be queried
        """
        role = Role.parse(role)
        try:
            rows = (
                session.query(Staff)
                .filter(Staff.role == role.value, Staff.is_active.is_(True))
                .order_by(Staff.staff_id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DependencyUnavailable(f"Could not list staff for role {role.value}: {e}") from e
        return [row.to_domain() for row in rows]

    @staticmethod
    def bulk_create(session: Session, staff: List[Staff]) -> None:
        """Create multiple staff rows."""
        session.add_all(staff)
        session.commit()


class AbsenceRepository:
    """Repository for vacation data access."""

    @staticmethod
    def get_all(session: Session) -> List[Vacation]:
        """Get all vacation rows, approved or not."""
        return session.query(Vacation).order_by(Vacation.staff_id, Vacation.start_date).all()

    @staticmethod
    def list_for_staff(
        session: Session,
        staff_ids: Iterable[int],
        date_range: DateRange,
    ) -> List[Absence]:
        """
        Approved vacations of the given staff overlapping the range.

        Raises:
            DependencyUnavailable: If the store cannot be queried
        """
        ids = list(staff_ids)
        if not ids:
            return []
        try:
            rows = (
                session.query(Vacation)
                .filter(
                    Vacation.staff_id.in_(ids),
                    Vacation.approved.is_(True),
                    Vacation.start_date <= date_range.end,
                    Vacation.end_date >= date_range.start,
                )
                .order_by(Vacation.staff_id, Vacation.start_date)
                .all()
            )
        except SQLAlchemyError as e:
            raise DependencyUnavailable(f"Could not list absences: {e}") from e
        return [row.to_domain() for row in rows]

    @staticmethod
    def bulk_create(session: Session, vacations: List[Vacation]) -> None:
        """Create multiple vacation rows."""
        session.add_all(vacations)
        session.commit()


class ShiftRepository:
    """Repository for shift data access."""

    @staticmethod
    def get_by_range(
        session: Session,
        start: date,
        end: date,
        staff_ids: Iterable[int] | None = None,
    ) -> List[Shift]:
        """Get shifts between two dates (inclusive), ordered by date then staff."""
        query = session.query(Shift).filter(Shift.date >= start, Shift.date <= end)
        if staff_ids is not None:
            query = query.filter(Shift.staff_id.in_(list(staff_ids)))
        return query.order_by(Shift.date, Shift.staff_id).all()

    @staticmethod
    def replace_range(
        session: Session,
        date_range: DateRange,
        staff_ids: Iterable[int],
        assignments: Iterable[ShiftAssignment],
    ) -> int:
        """
        Replace every shift of ``staff_ids`` inside the range in one transaction.

        Anything already pending on the session (e.g. a ``ScheduleGeneration``
        row) is committed together with the new shifts.

        Returns:
            Number of rows deleted

        Raises:
            DependencyUnavailable: If the transaction fails; nothing is written
        """
        ids = list(staff_ids)
        try:
            deleted = 0
            if ids:
                deleted = (
                    session.query(Shift)
                    .filter(
                        Shift.staff_id.in_(ids),
                        Shift.date >= date_range.start,
                        Shift.date <= date_range.end,
                    )
                    .delete(synchronize_session=False)
                )
            session.add_all([Shift.from_domain(a) for a in assignments])
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise DependencyUnavailable(f"Could not persist shifts: {e}") from e
        return deleted


class ScheduleGenerationRepository:
    """Repository for generation audit records."""

    @staticmethod
    def add(session: Session, generation: ScheduleGeneration) -> ScheduleGeneration:
        """Stage a generation record; committed by the caller's transaction."""
        session.add(generation)
        return generation

    @staticmethod
    def latest(session: Session, limit: int = 10) -> List[ScheduleGeneration]:
        """Most recent generation records first."""
        return (
            session.query(ScheduleGeneration)
            .order_by(ScheduleGeneration.created_at.desc(), ScheduleGeneration.id.desc())
            .limit(limit)
            .all()
        )
