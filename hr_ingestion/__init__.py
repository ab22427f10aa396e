"""
hr_ingestion -- typed conversion of store rows at the engine boundary.

Every row that feeds an engine passes through ``hr_ingestion.validators``
first.  Missing, non-numeric, non-finite or negative values raise a
``ValidationError`` subclass naming the offending field.
"""

from hr_ingestion.validators import (
    adjustments_from_row,
    attendance_period_from_row,
    attendance_record_from_row,
    feedback_record_from_row,
    metric_sample_from_row,
    payroll_history_from_row,
    salary_structure_from_row,
)

__all__ = [
    "salary_structure_from_row",
    "attendance_period_from_row",
    "adjustments_from_row",
    "metric_sample_from_row",
    "feedback_record_from_row",
    "attendance_record_from_row",
    "payroll_history_from_row",
]
