"""
Typed input records shared by the analysis engines.

These replace loosely shaped rows: every record reaching an engine has
already been validated by ``hr_ingestion.validators`` or built by the
service layer from ORM rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance outcome."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    LEAVE = "leave"


@dataclass(frozen=True)
class MetricSample:
    """One measurement of one performance metric."""

    metric_type: str
    metric_value: float
    measurement_date: date
    target_value: float | None = None


@dataclass(frozen=True)
class AttendanceRecord:
    """One day of attendance for one employee."""

    record_date: date
    status: AttendanceStatus
    working_hours: float = 0.0
    employee_id: str | None = None
    employee_name: str | None = None


@dataclass(frozen=True)
class FeedbackRecord:
    """One piece of review feedback."""

    feedback_text: str
    review_period_start: date
    review_period_end: date
    rating: float | None = None
    feedback_type: str = "self_review"


@dataclass(frozen=True)
class PayrollHistoryEntry:
    """The slice of a stored payroll row the anomaly scan needs."""

    employee_id: str
    created_at: datetime
    net_pay: Decimal
    total_deductions: Decimal
    working_days: int
    employee_name: str | None = None
