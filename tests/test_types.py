"""Tests for flat records, the roster view and the absence index."""

from datetime import date, timedelta

import pytest

from ward_scheduler.domain.types import (
    Absence,
    DateRange,
    OptimizationParameters,
    Role,
    ShiftType,
    StaffMember,
    is_weekend,
)
from ward_scheduler.errors import UnknownRoleError, ValidationError
from ward_scheduler.services.absences import AbsenceIndex
from ward_scheduler.services.roster import RosterView

MONDAY = date(2024, 1, 1)


@pytest.mark.parametrize("raw", ["NURSE", "nurse", " Nurse "])
def test_role_parse_nurse(raw):
    assert Role.parse(raw) is Role.NURSE


@pytest.mark.parametrize("raw", ["HEAD_NURSE", "head_nurse", "HeadNurse", "head-nurse", "Head Nurse"])
def test_role_parse_head_nurse(raw):
    assert Role.parse(raw) is Role.HEAD_NURSE


def test_role_parse_unknown():
    with pytest.raises(UnknownRoleError):
        Role.parse("doctor")


def test_shift_type_parse():
    assert ShiftType.parse("M") is ShiftType.MORNING
    assert ShiftType.parse("p") is ShiftType.AFTERNOON
    assert ShiftType.parse("night") is ShiftType.NIGHT
    assert ShiftType.parse("VACATION") is ShiftType.VACATION
    with pytest.raises(ValidationError):
        ShiftType.parse("X")


def test_work_shifts():
    assert [st for st in ShiftType if st.is_work] == [ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.NIGHT]


def test_is_weekend():
    assert not is_weekend(MONDAY)
    assert is_weekend(date(2024, 1, 6))
    assert is_weekend(date(2024, 1, 7))


def test_date_range():
    date_range = DateRange(MONDAY, MONDAY + timedelta(days=2))
    assert len(date_range) == 3
    assert list(date_range)[-1] == date(2024, 1, 3)
    assert date(2024, 1, 2) in date_range
    assert date(2024, 1, 4) not in date_range


def test_staff_member_validation():
    assert StaffMember(staff_id=1, role=Role.OSS, working_percentage=75).fte == 0.75
    with pytest.raises(ValidationError):
        StaffMember(staff_id=1, role=Role.NURSE, working_percentage=0)
    with pytest.raises(ValidationError):
        StaffMember(staff_id=1, role=Role.NURSE, working_percentage=101)
    with pytest.raises(ValidationError):
        StaffMember(staff_id=1, role=Role.NURSE, years_of_experience=-1)


def test_absence_validation():
    absence = Absence(1, MONDAY, MONDAY + timedelta(days=1))
    assert absence.covers(MONDAY)
    assert not absence.covers(MONDAY + timedelta(days=2))
    with pytest.raises(ValidationError):
        Absence(1, MONDAY, MONDAY - timedelta(days=1))


def test_parameters_from_camel_case():
    params = OptimizationParameters.from_dict(
        {"maxConsecutiveWorkDays": 5, "respectSeniority": True, "unknown": 1}
    )
    assert params.max_consecutive_work_days == 5
    assert params.respect_seniority is True
    assert params.balance_workload is True
    assert OptimizationParameters.from_dict(params.to_dict()) == params
    assert OptimizationParameters.from_dict(None) == OptimizationParameters()


def test_roster_view_sorted_by_id():
    staff = [
        StaffMember(staff_id=3, role=Role.NURSE),
        StaffMember(staff_id=1, role=Role.NURSE),
        StaffMember(staff_id=2, role=Role.OSS),
    ]
    roster = RosterView(staff)
    assert roster.ids == [1, 2, 3]
    assert [m.staff_id for m in roster] == [1, 2, 3]
    assert len(roster) == 3


def test_roster_view_rejects_duplicates():
    with pytest.raises(ValidationError):
        RosterView([StaffMember(staff_id=1, role=Role.NURSE), StaffMember(staff_id=1, role=Role.OSS)])


def test_absence_index():
    index = AbsenceIndex(
        [
            Absence(1, MONDAY, MONDAY + timedelta(days=1)),
            Absence(1, MONDAY + timedelta(days=5), MONDAY + timedelta(days=6)),
            Absence(2, MONDAY + timedelta(days=1), MONDAY + timedelta(days=1)),
        ]
    )
    assert len(index) == 3
    assert index.is_absent(1, MONDAY)
    assert not index.is_absent(1, MONDAY + timedelta(days=3))
    assert index.covering(1, MONDAY + timedelta(days=6)).start_date == MONDAY + timedelta(days=5)
    assert index.absent_on(MONDAY + timedelta(days=1)) == {1, 2}
    assert index.absent_on(MONDAY + timedelta(days=1), staff_ids=[2, 3]) == {2}


def test_absence_index_clipped_to_range():
    index = AbsenceIndex(
        [Absence(1, MONDAY - timedelta(days=5), MONDAY - timedelta(days=1)), Absence(2, MONDAY, MONDAY)],
        DateRange(MONDAY, MONDAY + timedelta(days=6)),
    )
    assert len(index) == 1
    assert index.for_staff(1) == []
