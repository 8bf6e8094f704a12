"""Tests for quality metrics and the 0-100 score."""

from datetime import date, timedelta

import pytest

from ward_scheduler.config import ScoreWeights
from ward_scheduler.domain.types import Role, ShiftAssignment, ShiftType, StaffMember
from ward_scheduler.engine.generator import generate_assignments
from ward_scheduler.services.scoring import (
    analyze_quality,
    compute_quality,
    count_isolated_rest_days,
    count_morning_to_night,
    count_night_to_morning,
    rest_runs,
    summarize_assignments,
)

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)
M, P, N, R, F = ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.NIGHT, ShiftType.REST, ShiftType.VACATION


def _staff(n):
    return [StaffMember(staff_id=i, role=Role.NURSE) for i in range(1, n + 1)]


def _roster(rows):
    """rows: {staff_id: [shift per day starting Monday]}"""
    return [
        ShiftAssignment(staff_id, MONDAY + timedelta(days=offset), shift_type)
        for staff_id, shifts in rows.items()
        for offset, shift_type in enumerate(shifts)
    ]


def test_component_formulas():
    metrics = compute_quality(_roster({1: [M, M], 2: [P, R]}), _staff(2))

    assert metrics.min_workload == 1
    assert metrics.max_workload == 2
    assert metrics.avg_workload == 1.5
    assert metrics.workload_balance_score == pytest.approx(10.0)
    assert metrics.weekend_balance_score == pytest.approx(25.0)
    assert metrics.transition_score == pytest.approx(20.0)
    assert metrics.base_distribution_score == 25
    assert metrics.overall_quality_score == pytest.approx(80.0)


def test_night_to_morning_counted():
    metrics = compute_quality(_roster({1: [N, M], 2: [M, P]}), _staff(2))
    assert metrics.night_to_morning_violations == 1
    assert metrics.transition_score == pytest.approx(10.0)


def test_transition_needs_consecutive_dates():
    assignments = [
        ShiftAssignment(1, MONDAY, N),
        ShiftAssignment(1, MONDAY + timedelta(days=2), M),
    ]
    assert count_night_to_morning(assignments) == 0


def test_score_clamped_at_zero():
    """One staff member works the whole week, the other never does."""
    metrics = compute_quality(_roster({1: [M] * 7, 2: [R] * 7}), _staff(2))

    assert metrics.workload_balance_score == pytest.approx(-30.0)
    assert metrics.weekend_balance_score == pytest.approx(-25.0)
    assert metrics.overall_quality_score == 0.0


def test_score_within_bounds_for_generated_roster():
    staff = _staff(9)
    assignments = generate_assignments((MONDAY, MONDAY + timedelta(days=30)), staff)
    metrics = compute_quality(assignments, staff)
    assert 0.0 <= metrics.overall_quality_score <= 100.0


def test_empty_inputs_score_full_marks():
    metrics = compute_quality([], [])
    assert metrics.workload_balance_score == 30
    assert metrics.overall_quality_score == 100.0
    assert metrics.shift_totals == {M: 0, P: 0, N: 0, R: 0, F: 0}


def test_order_independent():
    staff = _staff(6)
    assignments = generate_assignments((MONDAY, MONDAY + timedelta(days=13)), staff)
    forward = compute_quality(assignments, staff)
    backward = compute_quality(list(reversed(assignments)), list(reversed(staff)))
    assert forward == backward


def test_unknown_staff_excluded_and_reported(capsys):
    assignments = _roster({1: [M, P], 99: [N, N]})
    metrics = compute_quality(assignments, _staff(1))

    assert metrics.unknown_staff_ids == (99,)
    assert metrics.excluded_assignments == 2
    assert metrics.shift_totals[N] == 0
    assert "[WARN]" in capsys.readouterr().out


def test_staff_without_assignments_count_as_zero():
    metrics = compute_quality(_roster({1: [M, M]}), _staff(2))
    assert metrics.min_workload == 0
    assert metrics.max_workload == 2


def test_vacation_not_counted_as_work():
    metrics = compute_quality(_roster({1: [F, F], 2: [F, F]}), _staff(2))
    assert metrics.shift_totals[F] == 4
    assert metrics.max_workload == 0
    assert metrics.total_hours == {1: 0.0, 2: 0.0}


def test_totals_hours_and_weekends():
    # Friday..Sunday
    friday = date(2024, 1, 5)
    assignments = [
        ShiftAssignment(1, friday, M),
        ShiftAssignment(1, friday + timedelta(days=1), P),
        ShiftAssignment(1, friday + timedelta(days=2), N),
        ShiftAssignment(2, friday, R),
        ShiftAssignment(2, friday + timedelta(days=1), R),
        ShiftAssignment(2, friday + timedelta(days=2), M),
    ]
    metrics = compute_quality(assignments, _staff(2), shift_hours=7.5)

    assert metrics.shift_totals == {M: 2, P: 1, N: 1, R: 2, F: 0}
    assert metrics.max_weekend_workload == 2
    assert metrics.min_weekend_workload == 1
    assert metrics.total_hours == {1: 22.5, 2: 7.5}
    assert metrics.max_night_shifts == 1
    assert metrics.min_night_shifts == 0


def test_custom_weights():
    weights = ScoreWeights(workload_balance=0, weekend_balance=0, transition=50, base_distribution=50)
    metrics = compute_quality(_roster({1: [N, M]}), _staff(1), weights)
    assert metrics.overall_quality_score == pytest.approx(50.0)


def test_isolated_rest_days():
    assert count_isolated_rest_days(_roster({1: [M, R, P, R, R, N]})) == 1


def test_isolated_rest_days_at_roster_edges():
    assert count_isolated_rest_days(_roster({1: [R, M, R, R, M, R]})) == 2


def test_rest_runs_end_on_vacation_and_gaps():
    assert rest_runs(_roster({1: [R, F, R, R]})) == [1, 2]
    gapped = [ShiftAssignment(1, MONDAY, R), ShiftAssignment(1, MONDAY + timedelta(days=2), R)]
    assert rest_runs(gapped) == [1, 1]
    assert rest_runs(_roster({1: [M, P]})) == []


def test_morning_to_night_pairs():
    assert count_morning_to_night(_roster({1: [M, N, M, R, N]})) == 1
    assert count_night_to_morning(_roster({1: [M, N, M, R, N]})) == 1


def test_analysis_balanced_roster():
    analysis = analyze_quality(_roster({1: [M, P], 2: [P, M]}), _staff(2))

    assert analysis["workload_distribution"] == 10.0
    assert analysis["consecutive_rest_days"] == 10.0
    assert analysis["shift_sequence"] == 10.0
    assert analysis["weekend_balance"] == 10.0
    assert analysis["personal_preferences"] == 7.5
    assert analysis["night_shift_distribution"] == 10.0
    assert analysis["overall_score"] == pytest.approx(57.5 / 6)


def test_analysis_workload_distribution():
    uneven = analyze_quality(_roster({1: [M, M], 2: [R, R]}), _staff(2))
    assert uneven["workload_distribution"] == 0.0

    # counts 2, 2, 2, 0: std sqrt(0.75) against an allowance of 4 / 2
    spread = analyze_quality(_roster({1: [M, P], 2: [P, M], 3: [M, P], 4: [R, R]}), _staff(4))
    assert spread["workload_distribution"] == pytest.approx(10 * (1 - 0.75 ** 0.5 / 2))


def test_analysis_penalises_single_rest_days():
    analysis = analyze_quality(_roster({1: [R, M, R, R, M, R], 2: [M, M, M, M, M, M]}), _staff(2))
    assert analysis["consecutive_rest_days"] == 9.0


def test_analysis_shift_sequence_penalties():
    analysis = analyze_quality(_roster({1: [M, N, M], 2: [N, M, P]}), _staff(2))
    # one Morning->Night (1.0) and two Night->Morning (0.5 each)
    assert analysis["shift_sequence"] == 8.0


def test_analysis_weekend_balance():
    always = [M] * 14
    one_sunday = [M] * 5 + [R, M] + [M] * 5 + [R, R]
    assert analyze_quality(_roster({1: always, 2: one_sunday}), _staff(2))["weekend_balance"] == 5.0

    never = [M] * 5 + [R, R] + [M] * 5 + [R, R]
    assert analyze_quality(_roster({1: always, 2: never}), _staff(2))["weekend_balance"] == 0.0


def test_analysis_weekend_needs_both_days():
    # Monday to Saturday: the Saturday has no Sunday in the roster
    roster = _roster({1: [M] * 6, 2: [R] * 6})
    assert analyze_quality(roster, _staff(2))["weekend_balance"] == 10.0


def test_analysis_night_distribution():
    even = analyze_quality(_roster({1: [N, R, N, R], 2: [R, N, R, N]}), _staff(2))
    assert even["night_shift_distribution"] == 10.0

    # counts 2 and 1: std 0.5 against an allowance of max(1, 1.5 / 2)
    uneven = analyze_quality(_roster({1: [N, R, N, R], 2: [R, N, R, R]}), _staff(2))
    assert uneven["night_shift_distribution"] == 5.0


def test_analysis_overall_is_mean_of_components():
    analysis = analyze_quality(_roster({1: [N, M, R, P], 2: [R, R, N, N]}), _staff(2))
    components = [v for k, v in analysis.items() if k != "overall_score"]
    assert len(components) == 6
    assert analysis["overall_score"] == pytest.approx(sum(components) / 6)
    assert all(0.0 <= v <= 10.0 for v in analysis.values())


def test_analysis_ignores_unknown_staff():
    roster = _roster({1: [M, P], 2: [P, M]})
    noisy = roster + _roster({99: [N, M]})
    assert analyze_quality(noisy, _staff(2)) == analyze_quality(roster, _staff(2))


def test_analysis_empty_pool():
    analysis = analyze_quality([], [])
    assert analysis["workload_distribution"] == 10.0
    assert analysis["overall_score"] == pytest.approx(57.5 / 6)


def test_metrics_to_dict():
    data = compute_quality(_roster({1: [M]}), _staff(1)).to_dict()
    assert data["shift_totals"]["MORNING"] == 1
    assert data["unknown_staff_ids"] == []


def test_summarize_assignments():
    text = summarize_assignments(_roster({1: [M, N], 2: [R, P]}))
    assert "Coverage per day per shift" in text
    assert "MORNING" in text
    assert summarize_assignments([]) == "No assignments."
