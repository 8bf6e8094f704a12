"""Tests for the roster conflict checker."""

from datetime import date, timedelta

from ward_scheduler.domain.types import (
    Absence,
    OptimizationParameters,
    Role,
    ShiftAssignment,
    ShiftType,
    StaffMember,
)
from ward_scheduler.engine.generator import generate_assignments
from ward_scheduler.services.conflicts import ConflictKind, check_conflicts

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)


def test_clean_roster_has_no_conflicts():
    staff = [StaffMember(staff_id=i, role=Role.NURSE) for i in range(1, 6)]
    absences = [Absence(2, MONDAY, TUESDAY)]
    assignments = generate_assignments((MONDAY, MONDAY + timedelta(days=13)), staff, absences)

    assert check_conflicts(assignments, absences) == []
    assert check_conflicts(assignments, absences, OptimizationParameters()) == []


def test_duplicate_date_reported():
    assignments = [
        ShiftAssignment(1, MONDAY, ShiftType.NIGHT),
        ShiftAssignment(1, MONDAY, ShiftType.MORNING),
        ShiftAssignment(2, MONDAY, ShiftType.REST),
    ]
    conflicts = check_conflicts(assignments)

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.kind is ConflictKind.DUPLICATE_DATE
    assert conflict.staff_id == 1
    assert conflict.date == MONDAY
    assert conflict.shift_types == (ShiftType.MORNING, ShiftType.NIGHT)


def test_work_inside_absence_reported():
    assignments = [
        ShiftAssignment(3, MONDAY, ShiftType.VACATION),
        ShiftAssignment(3, TUESDAY, ShiftType.AFTERNOON),
    ]
    conflicts = check_conflicts(assignments, [Absence(3, MONDAY, TUESDAY)])

    assert [(c.kind, c.date, c.shift_types) for c in conflicts] == [
        (ConflictKind.ABSENCE_VIOLATION, TUESDAY, (ShiftType.AFTERNOON,))
    ]


def test_rest_inside_absence_is_still_a_violation():
    conflicts = check_conflicts([ShiftAssignment(3, MONDAY, ShiftType.REST)], [Absence(3, MONDAY, MONDAY)])
    assert conflicts[0].kind is ConflictKind.ABSENCE_VIOLATION


def test_vacation_outside_absence_is_not_reported():
    assert check_conflicts([ShiftAssignment(3, MONDAY, ShiftType.VACATION)]) == []


def test_rule_checks_only_with_params():
    assignments = [
        ShiftAssignment(1, MONDAY, ShiftType.NIGHT),
        ShiftAssignment(1, TUESDAY, ShiftType.MORNING),
    ]
    assert check_conflicts(assignments) == []

    conflicts = check_conflicts(assignments, params=OptimizationParameters())
    assert [c.kind for c in conflicts] == [ConflictKind.FORBIDDEN_TRANSITION]
    assert conflicts[0].date == TUESDAY

    relaxed = OptimizationParameters(avoid_night_after_morning=False)
    assert check_conflicts(assignments, params=relaxed) == []


def test_consecutive_limit_reported():
    assignments = [
        ShiftAssignment(1, MONDAY + timedelta(days=i), ShiftType.AFTERNOON) for i in range(4)
    ]
    conflicts = check_conflicts(assignments, params=OptimizationParameters(max_consecutive_work_days=3))

    assert len(conflicts) == 1
    assert conflicts[0].kind is ConflictKind.CONSECUTIVE_LIMIT
    assert conflicts[0].date == MONDAY
    assert conflicts[0].shift_types == (ShiftType.AFTERNOON,) * 4


def test_conflicts_sorted_and_input_untouched():
    assignments = [
        ShiftAssignment(2, TUESDAY, ShiftType.MORNING),
        ShiftAssignment(2, TUESDAY, ShiftType.REST),
        ShiftAssignment(1, TUESDAY, ShiftType.MORNING),
        ShiftAssignment(1, MONDAY, ShiftType.NIGHT),
        ShiftAssignment(1, MONDAY, ShiftType.REST),
    ]
    snapshot = list(assignments)
    conflicts = check_conflicts(assignments, [Absence(1, MONDAY, MONDAY)])

    assert [(c.staff_id, c.date, c.kind) for c in conflicts] == [
        (1, MONDAY, ConflictKind.DUPLICATE_DATE),
        (1, MONDAY, ConflictKind.ABSENCE_VIOLATION),
        (2, TUESDAY, ConflictKind.DUPLICATE_DATE),
    ]
    assert assignments == snapshot
