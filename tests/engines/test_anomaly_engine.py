"""
Tests for the Anomaly Detector.

One outlier among n otherwise identical values always sits sqrt(n - 1)
population standard deviations from the mean, which makes the severity
boundaries easy to hit: n=9 -> 2.83 (medium), n=10 -> 3.0 (medium, the
cut-off is strict), n=11 -> 3.16 (high).
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from hr_config.schema import AnomalyPolicy
from hr_engines.anomaly import (
    EXCESSIVE_LATE_ARRIVALS,
    AnomalyDetector,
    AnomalyType,
    Severity,
    SourceRecord,
    classify_anomaly_type,
)
from hr_engines.records import AttendanceRecord, AttendanceStatus, PayrollHistoryEntry


def _records(n: int, subject: str = "emp-1") -> list[SourceRecord]:
    return [SourceRecord(subject, date(2024, 1, 1) + timedelta(days=i)) for i in range(n)]


def _one_outlier(n: int, base: float = 10.0, outlier: float = 100.0) -> list[float]:
    return [base] * (n - 1) + [outlier]


class TestDetect:
    """Tests for the core z-score scan."""

    def setup_method(self):
        self.detector = AnomalyDetector()

    def test_high_severity_outlier(self):
        anomalies = self.detector.detect(
            values=_one_outlier(11), records=_records(11), metric_type="net_pay"
        )

        assert len(anomalies) == 1
        anomaly = anomalies[0]
        assert anomaly.value == 100.0
        assert anomaly.severity == Severity.HIGH
        assert anomaly.z_score == pytest.approx(10 ** 0.5)
        assert anomaly.mean == pytest.approx(200 / 11)
        assert anomaly.anomaly_type == AnomalyType.PAYROLL
        assert anomaly.record_date == date(2024, 1, 11)

    def test_description_format(self):
        anomaly = self.detector.detect(
            values=_one_outlier(11), records=_records(11), metric_type="net_pay"
        )[0]

        assert anomaly.description == (
            "net pay of 100 is 3.16 standard deviations from the mean (18.18)"
        )

    def test_only_first_underscore_replaced(self):
        anomaly = self.detector.detect(
            values=_one_outlier(11), records=_records(11), metric_type="total_net_pay"
        )[0]

        assert anomaly.description.startswith("total net_pay of 100")

    def test_medium_severity_outlier(self):
        anomalies = self.detector.detect(
            values=_one_outlier(9), records=_records(9), metric_type="working_hours"
        )

        assert len(anomalies) == 1
        assert anomalies[0].severity == Severity.MEDIUM
        assert anomalies[0].anomaly_type == AnomalyType.ATTENDANCE

    def test_high_cutoff_is_strict(self):
        anomalies = self.detector.detect(
            values=_one_outlier(10), records=_records(10), metric_type="net_pay"
        )

        assert anomalies[0].z_score == pytest.approx(3.0)
        assert anomalies[0].severity == Severity.MEDIUM

    def test_below_threshold_not_flagged(self):
        # sqrt(6) = 2.45 <= 2.5
        assert self.detector.detect(
            values=_one_outlier(7), records=_records(7), metric_type="net_pay"
        ) == []

    def test_low_severity_with_lowered_threshold(self):
        anomalies = self.detector.detect(
            values=_one_outlier(7), records=_records(7), metric_type="net_pay", threshold=2.0
        )

        assert len(anomalies) == 1
        assert anomalies[0].severity == Severity.LOW

    def test_too_few_samples(self):
        assert self.detector.detect(
            values=[1.0, 100.0], records=_records(2), metric_type="net_pay"
        ) == []

    def test_constant_series(self):
        assert self.detector.detect(
            values=[5.0] * 12, records=_records(12), metric_type="net_pay"
        ) == []

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="index-aligned"):
            self.detector.detect(values=[1.0, 2.0, 3.0], records=_records(2), metric_type="x")

    def test_custom_min_samples(self):
        detector = AnomalyDetector(AnomalyPolicy(min_samples=20))

        assert detector.detect(
            values=_one_outlier(11), records=_records(11), metric_type="net_pay"
        ) == []

    def test_to_dict(self):
        anomaly = self.detector.detect(
            values=_one_outlier(11), records=_records(11), metric_type="net_pay"
        )[0]
        data = anomaly.to_dict()

        assert data["severity"] == "high"
        assert data["anomaly_type"] == "payroll"
        assert data["record_date"] == "2024-01-11"


class TestClassifyAnomalyType:

    @pytest.mark.parametrize(
        "metric_type, expected",
        [
            ("net_pay", AnomalyType.PAYROLL),
            ("total_deductions", AnomalyType.PAYROLL),
            ("overtime_days", AnomalyType.ATTENDANCE),
            ("working_hours", AnomalyType.ATTENDANCE),
        ],
    )
    def test_classification(self, metric_type, expected):
        assert classify_anomaly_type(metric_type) == expected


class TestPayrollScan:
    """Tests for per-employee payroll history scans."""

    def setup_method(self):
        self.detector = AnomalyDetector()

    def _history(self, employee_id, net_pays, working_days=None, deductions=None):
        start = datetime(2023, 1, 28, tzinfo=timezone.utc)
        n = len(net_pays)
        working_days = working_days or [22] * n
        deductions = deductions or [5000] * n
        return [
            PayrollHistoryEntry(
                employee_id=employee_id,
                created_at=start + timedelta(days=30 * i),
                net_pay=Decimal(net_pays[i]),
                total_deductions=Decimal(deductions[i]),
                working_days=working_days[i],
                employee_name="Kunal Desai",
            )
            for i in range(n)
        ]

    def test_net_pay_drop_flagged(self):
        history = self._history("emp-1", [50000] * 10 + [5000])

        anomalies = self.detector.detect_payroll_anomalies(history=history)

        assert len(anomalies) == 1
        assert anomalies[0].metric_type == "net_pay"
        assert anomalies[0].subject_name == "Kunal Desai"
        assert anomalies[0].severity == Severity.HIGH

    def test_history_sorted_oldest_first(self):
        history = self._history("emp-1", [50000] * 10 + [5000])

        anomalies = self.detector.detect_payroll_anomalies(history=list(reversed(history)))

        assert anomalies[0].record_date == history[-1].created_at

    def test_overtime_is_an_attendance_finding(self):
        history = self._history("emp-1", [50000] * 11, working_days=[22] * 10 + [30])

        anomalies = self.detector.detect_payroll_anomalies(history=history)

        assert [a.metric_type for a in anomalies] == ["overtime_days"]
        assert anomalies[0].value == 8.0
        assert anomalies[0].anomaly_type == AnomalyType.ATTENDANCE

    def test_employees_scanned_separately(self):
        history = self._history("emp-1", [50000] * 11) + self._history(
            "emp-2", [20000] * 11
        )

        assert self.detector.detect_payroll_anomalies(history=history) == []

    def test_empty_history(self):
        assert self.detector.detect_payroll_anomalies(history=[]) == []


class TestAttendanceScan:
    """Tests for per-employee attendance scans."""

    def setup_method(self):
        self.detector = AnomalyDetector()

    def _day(self, i, status=AttendanceStatus.PRESENT, hours=8.0, employee_id="emp-1"):
        return AttendanceRecord(
            record_date=date(2024, 5, 1) + timedelta(days=i),
            status=status,
            working_hours=hours,
            employee_id=employee_id,
            employee_name="Neha Bhat",
        )

    def test_short_day_flagged(self):
        records = [self._day(i) for i in range(10)] + [self._day(10, hours=2.0)]

        anomalies = self.detector.detect_attendance_anomalies(records=records)

        assert len(anomalies) == 1
        assert anomalies[0].metric_type == "working_hours"
        assert anomalies[0].value == 2.0
        assert anomalies[0].record_date == date(2024, 5, 11)

    def test_absent_days_excluded_from_hours(self):
        records = [self._day(i) for i in range(10)] + [
            self._day(10, status=AttendanceStatus.ABSENT, hours=0.0)
        ]

        assert self.detector.detect_attendance_anomalies(records=records) == []

    def test_excessive_late_arrivals_medium(self):
        records = [self._day(i) for i in range(8)] + [
            self._day(8 + i, status=AttendanceStatus.LATE) for i in range(3)
        ]

        anomalies = self.detector.detect_attendance_anomalies(records=records, lookback_days=30)

        assert len(anomalies) == 1
        late = anomalies[0]
        assert late.metric_type == EXCESSIVE_LATE_ARRIVALS
        assert late.severity == Severity.MEDIUM
        assert late.z_score is None
        assert late.description == "27.3% late arrivals in the last 30 days"
        assert late.subject_name == "Neha Bhat"

    def test_excessive_late_arrivals_high(self):
        records = [self._day(i) for i in range(5)] + [
            self._day(5 + i, status=AttendanceStatus.LATE) for i in range(5)
        ]

        anomalies = self.detector.detect_attendance_anomalies(records=records)

        assert anomalies[0].severity == Severity.HIGH
        assert anomalies[0].value == pytest.approx(50.0)
        assert "last 90 days" in anomalies[0].description

    def test_late_at_threshold_not_flagged(self):
        records = [self._day(i) for i in range(8)] + [
            self._day(8 + i, status=AttendanceStatus.LATE) for i in range(2)
        ]

        assert self.detector.detect_attendance_anomalies(records=records) == []

    def test_scan_logs_completion(self, captured_logs):
        self.detector.detect_attendance_anomalies(records=[self._day(0)])

        logs = captured_logs()
        assert any(r["message"] == "attendance_anomaly_scan_completed" for r in logs)
