"""
Payroll Domain Models (``hr_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects for the payroll module: employees, stored
salary structures, stored monthly payrolls, and the outcome of a payroll
run.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``PayrollService`` and returned to callers.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from hr_engines.payroll import SalaryStructure


class PayrollStatus(Enum):
    """Stored payroll lifecycle states."""
    DRAFT = "draft"
    FINALIZED = "finalized"


class PayrollRunStatus(Enum):
    """Outcome of ``PayrollService.run_payroll``."""
    CALCULATED = "calculated"
    ALREADY_CALCULATED = "already_calculated"
    FAILED = "failed"


@dataclass(frozen=True)
class Employee:
    """An employee as the HR core sees it."""
    id: UUID
    employee_code: str
    first_name: str
    last_name: str
    email: str | None = None
    department: str | None = None
    designation: str | None = None
    hire_date: date | None = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class SalaryStructureRecord:
    """A stored salary structure with its effective range.

    Superseded records keep their amounts; only ``effective_to`` and
    ``is_active`` change when a revision takes over.
    """
    id: UUID
    employee_id: UUID
    structure: SalaryStructure
    effective_from: date
    effective_to: date | None = None
    is_active: bool = True

    @property
    def ctc(self) -> Decimal:
        return self.structure.ctc


@dataclass(frozen=True)
class Payroll:
    """One employee's stored payroll for one month."""
    id: UUID
    employee_id: UUID
    month: int
    year: int
    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    transport_allowance: Decimal
    medical_allowance: Decimal
    other_allowances: Decimal
    bonus: Decimal
    total_earnings: Decimal
    pf: Decimal
    tds: Decimal
    esi: Decimal
    lop_deduction: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    working_days: int
    present_days: int
    lop_days: int
    status: PayrollStatus = PayrollStatus.DRAFT
    finalized_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PayrollRunOutcome:
    """Result of a payroll run.

    Calculation errors (no working days, no salary structure) come back as
    ``FAILED`` with the error's machine-readable code instead of raising.
    """
    status: PayrollRunStatus
    employee_id: UUID
    month: int
    year: int
    payroll: Payroll | None = None
    error_code: str | None = None
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status in (
            PayrollRunStatus.CALCULATED,
            PayrollRunStatus.ALREADY_CALCULATED,
        )
