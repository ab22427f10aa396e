"""Tests for the HR log payloads produced by hr_kernel/logging_config.py."""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from hr_kernel.exceptions import (
    AttendanceInconsistentError,
    PayrollRunFailedError,
    SalaryStructureNotFoundError,
)
from hr_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def stream():
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler)
    return buffer


def _records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestPayrollPayloads:

    def test_run_event_with_employee_context(self, stream):
        employee, actor = uuid4(), uuid4()
        with LogContext.bind(employee_id=employee, actor_id=actor, job_id="payroll-2024-06"):
            get_logger("modules.payroll").info(
                "payroll_run_committed",
                extra={"period": "2024-06", "net_pay": Decimal("47700")},
            )

        (record,) = _records(stream)
        assert record["logger"] == "hr_kernel.modules.payroll"
        assert record["employee_id"] == str(employee)
        assert record["actor_id"] == str(actor)
        assert record["job_id"] == "payroll-2024-06"
        assert record["net_pay"] == "47700"

    def test_dates_and_store_scaled_amounts_encoded(self, stream):
        payroll_id = uuid4()
        get_logger("seeding").info(
            "payroll_seeded",
            extra={
                "payroll_id": payroll_id,
                "pay_date": date(2024, 6, 30),
                "stamped_at": datetime(2024, 6, 30, 12, tzinfo=timezone.utc),
                "basic_salary": Decimal("30000.000000000"),
            },
        )

        (record,) = _records(stream)
        assert record["payroll_id"] == str(payroll_id)
        assert record["pay_date"] == "2024-06-30"
        assert record["stamped_at"] == "2024-06-30T12:00:00+00:00"
        assert record["basic_salary"] == "30000.000000000"

    def test_context_cleared_after_bind(self, stream):
        logger = get_logger("engines.anomaly")
        with LogContext.bind(employee_id="emp-1", trace_id="scan-9"):
            logger.info("anomaly_scan_started")
        logger.info("anomaly_scan_completed")

        started, completed = _records(stream)
        assert started["trace_id"] == "scan-9"
        assert "employee_id" not in completed
        assert "trace_id" not in completed


class TestHRExceptionFields:

    def test_structure_not_found(self, stream):
        try:
            raise SalaryStructureNotFoundError("emp-7")
        except SalaryStructureNotFoundError:
            get_logger("test").error("structure_missing", exc_info=True)

        (record,) = _records(stream)
        assert record["exc_code"] == "SALARY_STRUCTURE_NOT_FOUND"
        assert record["exc_employee_id"] == "emp-7"
        assert "traceback" in record

    def test_failed_run_carries_reason(self, stream):
        try:
            raise PayrollRunFailedError("emp-3", "2024-05", "ZERO_WORKING_DAYS")
        except PayrollRunFailedError:
            get_logger("seeding").warning("seed_employee_failed", exc_info=True)

        (record,) = _records(stream)
        assert record["level"] == "WARNING"
        assert record["exc_code"] == "PAYROLL_RUN_FAILED"
        assert record["exc_period"] == "2024-05"
        assert record["exc_reason_code"] == "ZERO_WORKING_DAYS"

    def test_attendance_counts(self, stream):
        try:
            raise AttendanceInconsistentError(22, 20, 5)
        except AttendanceInconsistentError:
            get_logger("test").error("attendance_rejected", exc_info=True)

        (record,) = _records(stream)
        assert (record["exc_working_days"], record["exc_present_days"], record["exc_lop_days"]) == (
            22, 20, 5,
        )


class TestHRContextFields:

    def test_five_fields(self):
        LogContext.set(
            correlation_id="c", employee_id="e", actor_id="a", job_id="j", trace_id="t"
        )

        assert LogContext.get_all() == {
            "correlation_id": "c",
            "employee_id": "e",
            "actor_id": "a",
            "job_id": "j",
            "trace_id": "t",
        }

    def test_bind_ignores_non_context_names(self):
        with LogContext.bind(department="Engineering", employee_id="emp-2"):
            assert LogContext.get_all() == {"employee_id": "emp-2"}

    def test_configure_once(self, stream):
        configure_logging(handler=logging.StreamHandler(StringIO()))

        assert len(logging.getLogger("hr_kernel").handlers) == 1
