"""
Row validators for the engine input boundary.

Store rows arrive as plain mappings keyed by snake_case column names.
Each ``*_from_row`` function checks the fields the engines rely on and
returns the typed record, failing fast on the first bad field so that
nothing like NaN reaches the arithmetic.

Architecture: hr_ingestion. ZERO I/O. Imports only from hr_kernel and
hr_engines record types.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from hr_engines.payroll import AttendancePeriod, PayrollAdjustments, SalaryStructure
from hr_engines.records import (
    AttendanceRecord,
    AttendanceStatus,
    FeedbackRecord,
    MetricSample,
    PayrollHistoryEntry,
)
from hr_kernel.exceptions import InvalidFieldValueError, MissingFieldError

# Store uses Numeric(38, 9) for amounts
_MAX_DECIMAL_PLACES = 9

SALARY_FIELDS = (
    "basic_salary",
    "hra",
    "special_allowance",
    "transport_allowance",
    "medical_allowance",
    "other_allowances",
)

ATTENDANCE_FIELDS = ("working_days", "present_days", "lop_days")


# -----------------------------------------------------------------------------
# Field-level parsers
# -----------------------------------------------------------------------------


def require_field(row: Mapping[str, Any], field: str, record_type: str | None = None) -> Any:
    """Return ``row[field]``; absent and None are both missing."""
    value = row.get(field)
    if value is None:
        raise MissingFieldError(field, record_type)
    return value


def parse_amount(
    row: Mapping[str, Any],
    field: str,
    record_type: str | None = None,
    default: Decimal | None = None,
) -> Decimal:
    """Parse a non-negative, finite monetary amount."""
    if row.get(field) is None and default is not None:
        return default
    value = require_field(row, field, record_type)
    if isinstance(value, bool):
        raise InvalidFieldValueError(field, value, "not a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidFieldValueError(field, value, "not a number") from None
    if not amount.is_finite():
        raise InvalidFieldValueError(field, value, "not finite")
    if amount < 0:
        raise InvalidFieldValueError(field, value, "negative")
    exponent = amount.as_tuple().exponent
    if isinstance(exponent, int) and -exponent > _MAX_DECIMAL_PLACES:
        raise InvalidFieldValueError(
            field, value, f"more than {_MAX_DECIMAL_PLACES} decimal places"
        )
    return amount


def parse_number(
    row: Mapping[str, Any],
    field: str,
    record_type: str | None = None,
    allow_negative: bool = False,
) -> float:
    """Parse a finite float (metric values, hours, ratings)."""
    value = require_field(row, field, record_type)
    if isinstance(value, bool):
        raise InvalidFieldValueError(field, value, "not a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidFieldValueError(field, value, "not a number") from None
    if not math.isfinite(number):
        raise InvalidFieldValueError(field, value, "not finite")
    if number < 0 and not allow_negative:
        raise InvalidFieldValueError(field, value, "negative")
    return number


def parse_count(row: Mapping[str, Any], field: str, record_type: str | None = None) -> int:
    """Parse a non-negative whole number of days."""
    number = parse_number(row, field, record_type)
    if not number.is_integer():
        raise InvalidFieldValueError(field, row[field], "not a whole number")
    return int(number)


def parse_date_field(
    row: Mapping[str, Any], field: str, record_type: str | None = None
) -> date:
    value = require_field(row, field, record_type)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidFieldValueError(field, value, "not an ISO date") from None


def parse_datetime_field(
    row: Mapping[str, Any], field: str, record_type: str | None = None
) -> datetime:
    value = require_field(row, field, record_type)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise InvalidFieldValueError(field, value, "not an ISO timestamp") from None


def _subject_id(row: Mapping[str, Any], record_type: str) -> str:
    for key in ("employee_id", "user_id"):
        if row.get(key) is not None:
            return str(row[key])
    raise MissingFieldError("employee_id", record_type)


# -----------------------------------------------------------------------------
# Record builders
# -----------------------------------------------------------------------------


def salary_structure_from_row(row: Mapping[str, Any]) -> SalaryStructure:
    return SalaryStructure(
        **{name: parse_amount(row, name, "salary_structure") for name in SALARY_FIELDS}
    )


def attendance_period_from_row(row: Mapping[str, Any]) -> AttendancePeriod:
    """Build an ``AttendancePeriod``; a missing ``lop_days`` means none."""
    counts = {
        name: parse_count(row, name, "attendance")
        for name in ("working_days", "present_days")
    }
    counts["lop_days"] = (
        parse_count(row, "lop_days", "attendance") if row.get("lop_days") is not None else 0
    )
    return AttendancePeriod(**counts)


def adjustments_from_row(row: Mapping[str, Any]) -> PayrollAdjustments:
    """Manual overrides; both are optional and default to zero."""
    zero = Decimal("0")
    return PayrollAdjustments(
        bonus=parse_amount(row, "bonus", "payroll", default=zero),
        manual_deductions=parse_amount(row, "other_deductions", "payroll", default=zero),
    )


def metric_sample_from_row(row: Mapping[str, Any]) -> MetricSample:
    target = row.get("target_value")
    return MetricSample(
        metric_type=str(require_field(row, "metric_type", "performance_metric")),
        metric_value=parse_number(
            row, "metric_value", "performance_metric", allow_negative=True
        ),
        measurement_date=parse_date_field(row, "measurement_date", "performance_metric"),
        target_value=(
            parse_number(row, "target_value", "performance_metric") if target is not None else None
        ),
    )


def feedback_record_from_row(row: Mapping[str, Any]) -> FeedbackRecord:
    rating = row.get("rating")
    text = require_field(row, "feedback_text", "performance_feedback")
    if not isinstance(text, str):
        raise InvalidFieldValueError("feedback_text", text, "not text")
    return FeedbackRecord(
        feedback_text=text,
        review_period_start=parse_date_field(row, "review_period_start", "performance_feedback"),
        review_period_end=parse_date_field(row, "review_period_end", "performance_feedback"),
        rating=parse_number(row, "rating", "performance_feedback") if rating is not None else None,
        feedback_type=str(row.get("feedback_type") or "self_review"),
    )


def attendance_record_from_row(row: Mapping[str, Any]) -> AttendanceRecord:
    raw_status = require_field(row, "status", "attendance")
    try:
        status = AttendanceStatus(str(raw_status))
    except ValueError:
        raise InvalidFieldValueError("status", raw_status, "unknown attendance status") from None
    hours = (
        parse_number(row, "working_hours", "attendance")
        if row.get("working_hours") is not None
        else 0.0
    )
    employee = row.get("employee_id") or row.get("user_id")
    return AttendanceRecord(
        record_date=parse_date_field(row, "date", "attendance"),
        status=status,
        working_hours=hours,
        employee_id=str(employee) if employee is not None else None,
        employee_name=row.get("employee_name"),
    )


def payroll_history_from_row(row: Mapping[str, Any]) -> PayrollHistoryEntry:
    return PayrollHistoryEntry(
        employee_id=_subject_id(row, "payroll"),
        created_at=parse_datetime_field(row, "created_at", "payroll"),
        net_pay=_signed_amount(row, "net_pay"),
        total_deductions=parse_amount(row, "total_deductions", "payroll"),
        working_days=parse_count(row, "working_days", "payroll"),
        employee_name=row.get("employee_name"),
    )


def _signed_amount(row: Mapping[str, Any], field: str) -> Decimal:
    # Net pay is the one stored amount that may legitimately be negative.
    parse_number(row, field, "payroll", allow_negative=True)
    return Decimal(str(row[field]).strip())
