"""
Pytest fixtures for the HR kernel test suite.

Provides:
- Structured logging for the whole run and a log-capture fixture
- In-memory SQLite sessions (fresh schema per test)
- A deterministic clock and a test actor
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO
from uuid import uuid4

import pytest

from hr_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from hr_kernel.domain.clock import DeterministicClock
from hr_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture hr_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, session):
            service.run_payroll(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_run_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("hr_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session():
    """A session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    s = get_session()
    yield s
    s.close()
    drop_tables()
    reset_engine()


# =============================================================================
# Time and identity
# =============================================================================


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 7, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def actor_id():
    return TEST_ACTOR_ID


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def make_employee(session, actor_id):
    """Factory that stores an employee and returns its ``Employee`` DTO."""
    from hr_modules.payroll.models import Employee
    from hr_modules.payroll.orm import EmployeeModel

    def _make(code: str = "EMP100", first_name: str = "Asha", last_name: str = "Rao"):
        employee = Employee(
            id=uuid4(),
            employee_code=code,
            first_name=first_name,
            last_name=last_name,
            department="Engineering",
        )
        session.add(EmployeeModel.from_dto(employee, created_by_id=actor_id))
        session.commit()
        return employee

    return _make


@pytest.fixture
def payroll_service(session, clock):
    from hr_modules.payroll.service import PayrollService

    return PayrollService(session, clock=clock)
