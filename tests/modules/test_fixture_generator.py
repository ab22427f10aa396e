"""Tests for the demo FixtureGenerator."""

import random
from datetime import date
from decimal import Decimal

import pytest

from hr_engines.records import AttendanceStatus
from hr_modules.seeding.generators import (
    DEMO_EMPLOYEES,
    METRIC_TYPES,
    FixtureGenerator,
    performance_level,
)

METRIC_RANGES = {name: (low, high) for name, low, high, _ in METRIC_TYPES}


def _generator(seed=42, method="geolocation"):
    return FixtureGenerator(random.Random(seed), verification_method=method)


class TestDeterminism:
    def test_same_seed_same_fixtures(self):
        a, b = _generator(3), _generator(3)

        assert a.salary_structure() == b.salary_structure()
        assert a.daily_attendance(date(2024, 6, 1), date(2024, 6, 30)) == b.daily_attendance(
            date(2024, 6, 1), date(2024, 6, 30)
        )
        assert a.performance_metrics(date(2024, 1, 1), date(2024, 6, 30)) == b.performance_metrics(
            date(2024, 1, 1), date(2024, 6, 30)
        )


class TestPayrollFixtures:
    def test_salary_structure_ratios(self):
        structure = _generator().salary_structure(50000)

        assert structure.basic_salary == Decimal("50000")
        assert structure.hra == Decimal("20000")
        assert structure.special_allowance == Decimal("15000")
        assert structure.transport_allowance == Decimal("3000")
        assert structure.medical_allowance == Decimal("2000")
        assert structure.other_allowances == Decimal("1000")

    def test_base_salary_within_bands(self):
        generator = _generator()
        for _ in range(200):
            assert 25000 <= generator.base_salary() <= 80000

    def test_attendance_samples_are_consistent(self):
        generator = _generator()
        for _ in range(200):
            sample = generator.attendance_sample()
            assert 22 <= sample.working_days <= 27
            assert 0 <= sample.lop_days <= 2
            assert sample.present_days + sample.lop_days == sample.working_days
            assert sample.leave_days == 0

    def test_adjustment_ranges(self):
        generator = _generator()
        for _ in range(200):
            adjustments = generator.adjustments()
            assert Decimal("0") <= adjustments.bonus < Decimal("5000")
            assert Decimal("0") <= adjustments.manual_deductions < Decimal("1000")


class TestDailyAttendance:
    def test_weekdays_only(self):
        records = _generator().daily_attendance(date(2024, 6, 1), date(2024, 6, 30))

        assert len(records) == 20
        assert all(r.record_date.weekday() < 5 for r in records)

    def test_absent_days_have_no_times(self):
        records = _generator(5).daily_attendance(date(2024, 1, 1), date(2024, 12, 31))

        absent = [r for r in records if r.status == AttendanceStatus.ABSENT]
        assert absent
        for record in absent:
            assert record.check_in_time is None
            assert record.check_out_time is None
            assert record.working_hours == 0.0

    def test_shift_hours(self):
        records = _generator(5).daily_attendance(date(2024, 1, 1), date(2024, 12, 31))

        for record in records:
            if record.status == AttendanceStatus.PRESENT:
                assert 7.5 <= record.working_hours <= 9.5
                assert record.check_in_time.hour in (8, 9)
            elif record.status == AttendanceStatus.LATE:
                assert 6.0 <= record.working_hours <= 7.5
                assert record.check_in_time.hour in (10, 11)
                assert record.check_in_time.minute >= 30

    @pytest.mark.parametrize("method, expected", [("geolocation", False), ("biometric", True)])
    def test_biometric_flag_follows_method(self, method, expected):
        records = _generator(method=method).daily_attendance(date(2024, 1, 1), date(2024, 3, 31))

        assert any(r.biometric_verified for r in records) is expected


class TestPerformanceFixtures:
    def test_metrics_per_month(self):
        metrics = _generator().performance_metrics(date(2024, 1, 1), date(2024, 6, 30))

        by_month: dict[int, list] = {}
        for metric in metrics:
            by_month.setdefault(metric.measurement_date.month, []).append(metric)
        assert sorted(by_month) == [1, 2, 3, 4, 5, 6]
        for month_metrics in by_month.values():
            types = [m.metric_type for m in month_metrics]
            assert 3 <= len(types) <= 5
            assert len(set(types)) == len(types)

    def test_metric_values_within_range(self):
        metrics = _generator().performance_metrics(date(2023, 1, 1), date(2024, 12, 31))

        for metric in metrics:
            low, high = METRIC_RANGES[metric.metric_type]
            assert low <= metric.metric_value <= high
            assert metric.measurement_date.day == 15
            assert metric.quarter == (metric.measurement_date.month - 1) // 3 + 1

    def test_quarterly_feedback(self):
        feedback = _generator().quarterly_feedback(date(2024, 1, 1), date(2024, 12, 31))

        assert [f.review_period_start for f in feedback] == [
            date(2024, 1, 1), date(2024, 4, 1), date(2024, 7, 1), date(2024, 10, 1),
        ]
        assert feedback[0].review_period_end == date(2024, 3, 31)
        for item in feedback:
            assert 3.2 <= item.rating <= 5.0
            assert item.feedback_type == "self_review"
            assert "{" not in item.feedback_text

    def test_last_quarter_clipped_to_end(self):
        feedback = _generator().quarterly_feedback(date(2024, 1, 1), date(2024, 5, 10))

        assert feedback[-1].review_period_end == date(2024, 5, 10)

    @pytest.mark.parametrize(
        "rating, level",
        [
            (4.7, "excellent"),
            (4.0, "strong"),
            (3.6, "good"),
            (3.0, "satisfactory"),
            (2.9, "needs improvement"),
        ],
    )
    def test_performance_level(self, rating, level):
        assert performance_level(rating) == level


class TestDemoEmployees:
    def test_all_profiles(self):
        employees = _generator().demo_employees()

        assert employees == DEMO_EMPLOYEES
        assert len({e.employee_code for e in employees}) == len(employees)

    def test_limited(self):
        assert [e.employee_code for e in _generator().demo_employees(3)] == [
            "EMP001", "EMP002", "EMP003",
        ]
