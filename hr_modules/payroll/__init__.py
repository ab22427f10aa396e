"""
Payroll Module (``hr_modules.payroll``).

Responsibility
--------------
Employees, salary structures and monthly payroll runs.  The arithmetic
lives in ``hr_engines.payroll``; this package fetches the authoritative
rows, invokes the calculator and stores the itemized result.

Invariants enforced
-------------------
* Transaction boundary owned by ``PayrollService`` (unless the caller
  passes ``auto_commit=False``).
* Salary structures are superseded, never edited.
* One payroll per employee per month.

Failure modes
-------------
* ``PayrollRunOutcome.is_success == False`` -- no working days or no
  active salary structure.
"""

from hr_modules.payroll.models import (
    Employee,
    Payroll,
    PayrollRunOutcome,
    PayrollRunStatus,
    PayrollStatus,
    SalaryStructureRecord,
)
from hr_modules.payroll.service import PayrollService

__all__ = [
    "Employee",
    "Payroll",
    "PayrollRunOutcome",
    "PayrollRunStatus",
    "PayrollStatus",
    "SalaryStructureRecord",
    "PayrollService",
]
