"""SQLAlchemy models for the ward scheduling system."""

from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from .types import Absence, OptimizationParameters, Role, ShiftAssignment, ShiftType, StaffMember


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Staff(Base):
    """Staff member with contract and seniority information."""

    __tablename__ = "staff"

    staff_id = Column(Integer, primary_key=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    role = Column(String(20), nullable=False)  # NURSE, OSS, HEAD_NURSE
    working_percentage = Column(Integer, nullable=False, default=100)  # 1-100
    years_of_experience = Column(Integer, nullable=False, default=0)
    available_for_extra_shifts = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    shifts = relationship("Shift", back_populates="staff")
    vacations = relationship("Vacation", back_populates="staff")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_domain(self) -> StaffMember:
        """Snapshot this row as an engine ``StaffMember``."""
        return StaffMember(
            staff_id=self.staff_id,
            role=Role.parse(self.role),
            working_percentage=self.working_percentage if self.working_percentage is not None else 100,
            years_of_experience=self.years_of_experience or 0,
            available_for_extra_shifts=bool(self.available_for_extra_shifts),
            name=self.full_name,
        )

    def __repr__(self) -> str:
        return f"<Staff(id={self.staff_id}, name='{self.full_name}', role='{self.role}')>"


class Vacation(Base):
    """Time off request; only approved rows block the roster."""

    __tablename__ = "vacations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.staff_id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # Inclusive
    approved = Column(Boolean, nullable=False, default=False)
    reason = Column(String(200), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="vacations")

    def to_domain(self) -> Absence:
        return Absence(self.staff_id, self.start_date, self.end_date)

    def __repr__(self) -> str:
        return (
            f"<Vacation(id={self.id}, staff={self.staff_id}, "
            f"{self.start_date}..{self.end_date}, approved={self.approved})>"
        )


class Shift(Base):
    """One staff member's shift on one date."""

    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("staff.staff_id"), nullable=False)
    date = Column(Date, nullable=False)
    shift_type = Column(String(1), nullable=False)  # M, P, N, R, F
    is_manually_assigned = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="shifts")

    @classmethod
    def from_domain(cls, assignment: ShiftAssignment) -> "Shift":
        return cls(
            staff_id=assignment.staff_id,
            date=assignment.date,
            shift_type=assignment.shift_type.value,
            is_manually_assigned=assignment.manually_assigned,
        )

    def to_domain(self) -> ShiftAssignment:
        return ShiftAssignment(
            staff_id=self.staff_id,
            date=self.date,
            shift_type=ShiftType.parse(self.shift_type),
            manually_assigned=bool(self.is_manually_assigned),
        )

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, staff={self.staff_id}, date={self.date}, type={self.shift_type})>"


class ScheduleGeneration(Base):
    """Audit record of one generation run."""

    __tablename__ = "schedule_generations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    staff_type = Column(String(20), nullable=False)
    optimization_parameters = Column(Text, nullable=False, default="{}")  # JSON
    quality_score = Column(Float, nullable=True)
    constraints_violated = Column(Integer, nullable=False, default=0)
    generation_time = Column(Float, nullable=True)  # Seconds
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    @property
    def parameters(self) -> OptimizationParameters:
        return OptimizationParameters.from_dict(json.loads(self.optimization_parameters or "{}"))

    def __repr__(self) -> str:
        return (
            f"<ScheduleGeneration(id={self.id}, {self.start_date}..{self.end_date}, "
            f"type={self.staff_type}, score={self.quality_score})>"
        )
