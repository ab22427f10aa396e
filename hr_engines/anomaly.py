"""
hr_engines.anomaly -- Z-score outlier detection over payroll and attendance.

Responsibility:
    Flag values whose z-score (distance from the series mean in population
    standard deviations) exceeds a threshold, and run the two standard
    scans built on it: per-employee payroll history and per-employee daily
    attendance (working hours plus excessive late arrivals).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by ``hr_modules.anomaly.service``.

Invariants enforced:
    - Fewer than ``min_samples`` values yields no anomalies (not an error).
    - Standard deviation is the population form (divide by n).
    - A constant series (std dev 0) yields no anomalies.
    - Flagging is strict: z > threshold.
    - Severity: z > high cut-off -> high, z > medium cut-off -> medium,
      otherwise low.  Under the default threshold (2.5) nothing below the
      medium cut-off is ever flagged, so ``low`` is unreachable there.

Failure modes:
    - ValueError when values and records differ in length.
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from hr_config.schema import AnomalyPolicy
from hr_engines.records import AttendanceRecord, AttendanceStatus, PayrollHistoryEntry
from hr_engines.tracer import traced_engine
from hr_kernel.domain.rounding import format_number
from hr_kernel.logging_config import get_logger

logger = get_logger("engines.anomaly")

EXCESSIVE_LATE_ARRIVALS = "excessive_late_arrivals"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnomalyType(str, Enum):
    PAYROLL = "payroll"
    ATTENDANCE = "attendance"


@dataclass(frozen=True)
class SourceRecord:
    """Identifies where a scanned value came from."""

    subject_id: str
    record_date: date | datetime | None = None
    subject_name: str | None = None


@dataclass(frozen=True)
class Anomaly:
    """
    A flagged outlier.

    Derived output, never the source of truth.  ``z_score``, ``mean`` and
    ``std_dev`` are None for rule-based findings such as excessive late
    arrivals.
    """

    subject_id: str
    metric_type: str
    value: float
    z_score: float | None
    mean: float | None
    std_dev: float | None
    severity: Severity
    anomaly_type: AnomalyType
    description: str = ""
    subject_name: str | None = None
    record_date: date | datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        data["anomaly_type"] = self.anomaly_type.value
        if self.record_date is not None:
            data["record_date"] = self.record_date.isoformat()
        return data


def classify_anomaly_type(metric_type: str) -> AnomalyType:
    """Metric names mentioning pay or deductions are payroll findings."""
    if "pay" in metric_type or "deduction" in metric_type:
        return AnomalyType.PAYROLL
    return AnomalyType.ATTENDANCE


def _group_by_employee(items: Sequence[Any]) -> dict[str, list[Any]]:
    groups: dict[str, list[Any]] = {}
    for item in items:
        groups.setdefault(item.employee_id or "", []).append(item)
    return groups


class AnomalyDetector:
    """
    Z-score anomaly detector.

    Contract:
        ``values[i]`` was read from ``records[i]``; both sequences have the
        same length.

    Guarantees:
        - Deterministic; anomalies are returned in input order.
    """

    def __init__(self, policy: AnomalyPolicy | None = None):
        self._policy = policy or AnomalyPolicy()

    @property
    def policy(self) -> AnomalyPolicy:
        return self._policy

    def severity_for(self, z_score: float) -> Severity:
        if z_score > self._policy.high_severity_z:
            return Severity.HIGH
        if z_score > self._policy.medium_severity_z:
            return Severity.MEDIUM
        return Severity.LOW

    @traced_engine("anomaly", "1.0", fingerprint_fields=("values", "metric_type"))
    def detect(
        self,
        *,
        values: Sequence[float],
        records: Sequence[SourceRecord],
        metric_type: str,
        threshold: float | None = None,
    ) -> list[Anomaly]:
        """Return the values whose z-score exceeds the threshold.

        Raises:
            ValueError: If ``values`` and ``records`` differ in length.
        """
        if len(values) != len(records):
            raise ValueError(
                f"values ({len(values)}) and records ({len(records)}) "
                "must be index-aligned"
            )
        if len(values) < self._policy.min_samples:
            return []

        limit = self._policy.z_threshold if threshold is None else threshold
        series = [float(v) for v in values]
        mean = statistics.fmean(series)
        std_dev = statistics.pstdev(series)
        if std_dev == 0:
            return []

        label = metric_type.replace("_", " ", 1)
        anomalies: list[Anomaly] = []
        for value, record in zip(series, records):
            z_score = abs(value - mean) / std_dev
            if z_score <= limit:
                continue
            anomalies.append(
                Anomaly(
                    subject_id=record.subject_id,
                    metric_type=metric_type,
                    value=value,
                    z_score=z_score,
                    mean=mean,
                    std_dev=std_dev,
                    severity=self.severity_for(z_score),
                    anomaly_type=classify_anomaly_type(metric_type),
                    description=(
                        f"{label} of {format_number(value)} is {z_score:.2f} "
                        f"standard deviations from the mean ({mean:.2f})"
                    ),
                    subject_name=record.subject_name,
                    record_date=record.record_date,
                )
            )
        return anomalies

    def detect_payroll_anomalies(
        self, *, history: Sequence[PayrollHistoryEntry]
    ) -> list[Anomaly]:
        """Scan each employee's payroll history, oldest first.

        Three series per employee: net pay, overtime days (working days
        beyond the standard month), and total deductions.
        """
        standard_days = self._policy.standard_working_days
        anomalies: list[Anomaly] = []
        for employee_id, entries in _group_by_employee(history).items():
            ordered = sorted(entries, key=lambda e: e.created_at)
            records = [
                SourceRecord(employee_id, e.created_at, e.employee_name) for e in ordered
            ]
            series = {
                "net_pay": [float(e.net_pay) for e in ordered],
                "overtime_days": [
                    float(max(e.working_days - standard_days, 0)) for e in ordered
                ],
                "total_deductions": [float(e.total_deductions) for e in ordered],
            }
            for metric_type, values in series.items():
                anomalies.extend(
                    self.detect(values=values, records=records, metric_type=metric_type)
                )

        logger.debug(
            "payroll_anomaly_scan_completed",
            extra={"entry_count": len(history), "anomaly_count": len(anomalies)},
        )
        return anomalies

    def detect_attendance_anomalies(
        self,
        *,
        records: Sequence[AttendanceRecord],
        lookback_days: int | None = None,
    ) -> list[Anomaly]:
        """Scan each employee's attendance, oldest first.

        Working hours are z-scored over days with hours > 0.  An employee
        late on more than ``late_arrival_threshold_pct`` percent of days
        gets an excessive-late-arrivals finding.
        """
        policy = self._policy
        days = policy.attendance_lookback_days if lookback_days is None else lookback_days
        anomalies: list[Anomaly] = []
        for employee_id, entries in _group_by_employee(records).items():
            ordered = sorted(entries, key=lambda r: r.record_date)
            worked = [r for r in ordered if r.working_hours > 0]
            anomalies.extend(
                self.detect(
                    values=[r.working_hours for r in worked],
                    records=[
                        SourceRecord(employee_id, r.record_date, r.employee_name)
                        for r in worked
                    ],
                    metric_type="working_hours",
                )
            )

            late = sum(1 for r in ordered if r.status == AttendanceStatus.LATE)
            late_pct = late / len(ordered) * 100
            if late_pct > policy.late_arrival_threshold_pct:
                anomalies.append(
                    Anomaly(
                        subject_id=employee_id,
                        metric_type=EXCESSIVE_LATE_ARRIVALS,
                        value=late_pct,
                        z_score=None,
                        mean=None,
                        std_dev=None,
                        severity=(
                            Severity.HIGH
                            if late_pct > policy.late_arrival_high_pct
                            else Severity.MEDIUM
                        ),
                        anomaly_type=AnomalyType.ATTENDANCE,
                        description=f"{late_pct:.1f}% late arrivals in the last {days} days",
                        subject_name=ordered[0].employee_name,
                    )
                )

        logger.debug(
            "attendance_anomaly_scan_completed",
            extra={"record_count": len(records), "anomaly_count": len(anomalies)},
        )
        return anomalies
