"""
hr_engines.trend -- Period-over-period trend classification and consistency.

Responsibility:
    Classify each performance metric and the attendance rate as improving,
    declining or stable, and score how consistent an employee has been.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock access: the
    reference date for attendance windows is a parameter.
    Consumed by ``hr_engines.insights`` and ``hr_modules.performance.service``.

Invariants enforced:
    - percent_change(current, 0) == 0, so a zero baseline is always stable.
    - Classification uses the unrounded change; only the reported change
      is rounded.
    - A metric needs ``min_trend_samples`` samples to get a trend and
      ``min_consistency_samples`` to count towards consistency.

Failure modes:
    - None.  Empty inputs produce empty / zero results.
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from hr_config.schema import TrendPolicy
from hr_engines.records import AttendanceRecord, AttendanceStatus, MetricSample
from hr_engines.tracer import traced_engine
from hr_kernel.domain.calendar import month_start
from hr_kernel.domain.rounding import round_half_ceiling, round_half_up
from hr_kernel.logging_config import get_logger

logger = get_logger("engines.trend")


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


@dataclass(frozen=True)
class TrendResult:
    """Latest value against the one before it."""

    current: float
    previous: float
    trend: Trend
    change: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "previous": self.previous,
            "trend": self.trend.value,
            "change": self.change,
        }


@dataclass(frozen=True)
class ConsistencyResult:
    score: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "description": self.description}


@dataclass(frozen=True)
class TrendAnalysis:
    """Everything the insight generator needs from the trend side."""

    attendance_rate: TrendResult
    consistency: ConsistencyResult
    performance_metrics: dict[str, TrendResult] = field(default_factory=dict)


def percent_change(current: float, previous: float) -> float:
    """Relative change in percent; a zero baseline reports no change."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def classify(change: float, band: float) -> Trend:
    """Stable inside the band, otherwise the sign decides."""
    if abs(change) < band:
        return Trend.STABLE
    return Trend.IMPROVING if change > 0 else Trend.DECLINING


def attendance_rate(records: Sequence[AttendanceRecord]) -> int:
    """Percentage of days marked present, rounded; 0 for no records."""
    if not records:
        return 0
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
    return int(round_half_up(present / len(records) * 100))


def consistency_description(score: int) -> str:
    if score >= 80:
        return "Highly consistent performance"
    if score >= 60:
        return "Good consistency with room for improvement"
    if score >= 40:
        return "Moderate consistency, focus needed"
    if score > 0:
        return "Low consistency, requires attention"
    return "No data available"


def _group_metrics(metrics: Sequence[MetricSample]) -> dict[str, list[MetricSample]]:
    groups: dict[str, list[MetricSample]] = {}
    for sample in metrics:
        groups.setdefault(sample.metric_type, []).append(sample)
    return groups


class TrendAnalyzer:
    """
    Trend and consistency analysis over metrics and attendance.

    Guarantees:
        - Metric trends use a ``policy.metric_stable_band`` percent band.
        - Attendance uses a ``policy.attendance_stable_band`` point band
          between the previous calendar month and the one before it.
    """

    def __init__(self, policy: TrendPolicy | None = None):
        self._policy = policy or TrendPolicy()

    @property
    def policy(self) -> TrendPolicy:
        return self._policy

    def compare(self, *, current: float, previous: float) -> TrendResult:
        """Classify a single metric step."""
        change = percent_change(current, previous)
        return TrendResult(
            current=current,
            previous=previous,
            trend=classify(change, self._policy.metric_stable_band),
            change=round_half_ceiling(change),
        )

    def metric_trends(self, metrics: Sequence[MetricSample]) -> dict[str, TrendResult]:
        """Last sample against the one before, per metric type."""
        results: dict[str, TrendResult] = {}
        for metric_type, samples in _group_metrics(metrics).items():
            if len(samples) < self._policy.min_trend_samples:
                continue
            ordered = sorted(samples, key=lambda s: s.measurement_date)
            results[metric_type] = self.compare(
                current=ordered[-1].metric_value,
                previous=ordered[-2].metric_value,
            )
        return results

    def attendance_trend(
        self, attendance: Sequence[AttendanceRecord], as_of: date
    ) -> TrendResult:
        """Attendance rate from the start of last month against the month before.

        Rates are whole percentages, so ``change`` is in percentage points.
        """
        last_month = month_start(as_of, 1)
        two_months_ago = month_start(as_of, 2)

        current_window = [r for r in attendance if r.record_date >= last_month]
        previous_window = [
            r for r in attendance if two_months_ago <= r.record_date < last_month
        ]
        current = attendance_rate(current_window)
        previous = attendance_rate(previous_window)
        change = current - previous
        return TrendResult(
            current=current,
            previous=previous,
            trend=classify(change, self._policy.attendance_stable_band),
            change=change,
        )

    def consistency(
        self,
        metrics: Sequence[MetricSample],
        attendance: Sequence[AttendanceRecord],
    ) -> ConsistencyResult:
        """Share of tracked factors that are steady, as a percentage.

        Attendance is one factor when any records exist.  Each metric type
        with enough samples is one factor, steady when its coefficient of
        variation is below ``policy.consistency_cv_threshold``.
        """
        policy = self._policy
        consistent = 0
        total = 0

        if attendance:
            total += 1
            if attendance_rate(attendance) >= policy.consistent_attendance_rate:
                consistent += 1

        for samples in _group_metrics(metrics).values():
            if len(samples) < policy.min_consistency_samples:
                continue
            total += 1
            values = [s.metric_value for s in samples]
            mean = statistics.fmean(values)
            if mean == 0:
                continue
            if statistics.pstdev(values) / mean < policy.consistency_cv_threshold:
                consistent += 1

        score = int(round_half_up(consistent / total * 100)) if total else 0
        return ConsistencyResult(score=score, description=consistency_description(score))

    @traced_engine("trend", "1.0", fingerprint_fields=("metrics", "attendance", "as_of"))
    def analyze(
        self,
        *,
        metrics: Sequence[MetricSample],
        attendance: Sequence[AttendanceRecord],
        as_of: date,
    ) -> TrendAnalysis:
        analysis = TrendAnalysis(
            attendance_rate=self.attendance_trend(attendance, as_of),
            consistency=self.consistency(metrics, attendance),
            performance_metrics=self.metric_trends(metrics),
        )
        logger.debug(
            "trend_analysis_completed",
            extra={
                "metric_types": sorted(analysis.performance_metrics),
                "consistency_score": analysis.consistency.score,
            },
        )
        return analysis
