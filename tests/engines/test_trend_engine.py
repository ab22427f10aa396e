"""
Tests for the Trend Analyzer.

Covers:
- Percent change and stability-band classification
- Per-metric trends (latest vs previous sample)
- Attendance trend between the two previous calendar months
- Consistency scoring
"""

from datetime import date

import pytest

from hr_config.schema import TrendPolicy
from hr_engines.records import AttendanceRecord, AttendanceStatus, MetricSample
from hr_engines.trend import (
    Trend,
    TrendAnalyzer,
    attendance_rate,
    classify,
    consistency_description,
    percent_change,
)


def _metric(metric_type, value, day):
    return MetricSample(metric_type=metric_type, metric_value=value, measurement_date=day)


def _attendance(day, status=AttendanceStatus.PRESENT):
    return AttendanceRecord(record_date=day, status=status, working_hours=8.0)


class TestPercentChange:

    def test_increase(self):
        assert percent_change(110, 100) == pytest.approx(10.0)

    def test_decrease(self):
        assert percent_change(80, 100) == pytest.approx(-20.0)

    def test_zero_baseline_reports_no_change(self):
        assert percent_change(50, 0) == 0.0


class TestClassify:

    @pytest.mark.parametrize(
        "change, expected",
        [
            (4.9, Trend.STABLE),
            (-4.9, Trend.STABLE),
            (5.0, Trend.IMPROVING),
            (-5.0, Trend.DECLINING),
            (0.0, Trend.STABLE),
        ],
    )
    def test_band_edges(self, change, expected):
        assert classify(change, 5) == expected


class TestMetricTrends:

    def setup_method(self):
        self.analyzer = TrendAnalyzer()

    def test_latest_against_previous(self):
        metrics = [
            _metric("tasks_completed", 30, date(2024, 3, 15)),
            _metric("tasks_completed", 20, date(2024, 1, 15)),
            _metric("tasks_completed", 25, date(2024, 2, 15)),
        ]

        trends = self.analyzer.metric_trends(metrics)

        result = trends["tasks_completed"]
        assert result.current == 30
        assert result.previous == 25
        assert result.change == 20.0
        assert result.trend == Trend.IMPROVING

    def test_single_sample_has_no_trend(self):
        assert self.analyzer.metric_trends([_metric("code_quality", 80, date(2024, 1, 15))]) == {}

    def test_classification_uses_unrounded_change(self):
        """4.6% reports as 5 but still sits inside the 5% band."""
        result = self.analyzer.compare(current=104.6, previous=100)

        assert result.change == 5.0
        assert result.trend == Trend.STABLE

    @pytest.mark.parametrize(
        "current, expected",
        [(179, -10.0), (221, 11.0), (199, -0.0)],
    )
    def test_ties_round_toward_positive(self, current, expected):
        """-10.5% reports as -10, +10.5% as 11."""
        result = self.analyzer.compare(current=current, previous=200)

        assert result.change == expected

    def test_to_dict(self):
        result = self.analyzer.compare(current=90, previous=100)

        assert result.to_dict() == {
            "current": 90,
            "previous": 100,
            "trend": "declining",
            "change": -10.0,
        }


class TestAttendanceTrend:

    def setup_method(self):
        self.analyzer = TrendAnalyzer()

    def test_windows_relative_to_as_of(self):
        may = [_attendance(date(2024, 5, d)) for d in range(1, 9)] + [
            _attendance(date(2024, 5, d), AttendanceStatus.ABSENT) for d in (9, 10)
        ]
        june = [_attendance(date(2024, 6, d)) for d in range(1, 11)]
        april = [_attendance(date(2024, 4, d), AttendanceStatus.ABSENT) for d in range(1, 11)]

        result = self.analyzer.attendance_trend(april + may + june, as_of=date(2024, 7, 15))

        assert result.previous == 80
        assert result.current == 100
        assert result.change == 20
        assert result.trend == Trend.IMPROVING

    def test_current_window_includes_this_month(self):
        records = [_attendance(date(2024, 7, 1), AttendanceStatus.ABSENT)]

        result = self.analyzer.attendance_trend(records, as_of=date(2024, 7, 15))

        assert result.current == 0
        assert result.previous == 0
        assert result.trend == Trend.STABLE

    def test_january_looks_back_into_previous_year(self):
        records = [_attendance(date(2023, 11, 20))]

        result = self.analyzer.attendance_trend(records, as_of=date(2024, 1, 10))

        assert result.previous == 100
        assert result.current == 0
        assert result.trend == Trend.DECLINING

    def test_small_change_is_stable(self):
        may = [_attendance(date(2024, 5, d)) for d in range(1, 8)]
        june = [_attendance(date(2024, 6, d)) for d in range(1, 8)]

        result = self.analyzer.attendance_trend(may + june, as_of=date(2024, 7, 1))

        assert result.change == 0
        assert result.trend == Trend.STABLE


class TestConsistency:

    def setup_method(self):
        self.analyzer = TrendAnalyzer()

    def test_mixed_factors(self):
        attendance = [_attendance(date(2024, 6, d)) for d in range(1, 11)]
        metrics = [
            _metric("goal_achievement", v, date(2024, m, 15))
            for m, v in ((1, 80), (2, 81), (3, 82))
        ] + [
            _metric("tasks_completed", v, date(2024, m, 15))
            for m, v in ((1, 10), (2, 90), (3, 50))
        ]

        result = self.analyzer.consistency(metrics, attendance)

        assert result.score == 67
        assert result.description == "Good consistency with room for improvement"

    def test_no_factors(self):
        result = self.analyzer.consistency([], [])

        assert result.score == 0
        assert result.description == "No data available"

    def test_metric_needs_three_samples(self):
        metrics = [_metric("code_quality", 80, date(2024, m, 15)) for m in (1, 2)]

        assert self.analyzer.consistency(metrics, []).score == 0

    def test_zero_mean_counts_but_is_not_consistent(self):
        metrics = [_metric("tasks_completed", 0, date(2024, m, 15)) for m in (1, 2, 3)]
        attendance = [_attendance(date(2024, 6, 1))]

        assert self.analyzer.consistency(metrics, attendance).score == 50

    def test_low_attendance_not_consistent(self):
        attendance = [_attendance(date(2024, 6, d)) for d in range(1, 9)] + [
            _attendance(date(2024, 6, d), AttendanceStatus.LATE) for d in (9, 10)
        ]

        assert self.analyzer.consistency([], attendance).score == 0

    @pytest.mark.parametrize(
        "score, description",
        [
            (80, "Highly consistent performance"),
            (60, "Good consistency with room for improvement"),
            (40, "Moderate consistency, focus needed"),
            (1, "Low consistency, requires attention"),
            (0, "No data available"),
        ],
    )
    def test_description_bands(self, score, description):
        assert consistency_description(score) == description


class TestAttendanceRate:

    def test_only_present_counts(self):
        records = [
            _attendance(date(2024, 6, 1)),
            _attendance(date(2024, 6, 2), AttendanceStatus.LATE),
            _attendance(date(2024, 6, 3), AttendanceStatus.HALF_DAY),
        ]

        assert attendance_rate(records) == 33

    def test_empty(self):
        assert attendance_rate([]) == 0


class TestAnalyze:

    def test_analyze_combines_parts(self, captured_logs):
        analyzer = TrendAnalyzer(TrendPolicy(metric_stable_band=1))
        metrics = [
            _metric("code_quality", 80, date(2024, 5, 15)),
            _metric("code_quality", 81, date(2024, 6, 15)),
        ]

        analysis = analyzer.analyze(metrics=metrics, attendance=[], as_of=date(2024, 7, 15))

        assert analysis.performance_metrics["code_quality"].trend == Trend.IMPROVING
        assert analysis.attendance_rate.current == 0
        logs = captured_logs()
        trace = next(r for r in logs if r["message"] == "HR_ENGINE_TRACE")
        assert trace["engine_name"] == "trend"
