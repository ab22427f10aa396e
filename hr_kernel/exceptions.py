"""
Typed Exception Hierarchy for the HR Kernel.

Every error carries:
  1. a TYPED exception class (catch by type, not message),
  2. a ``code`` class attribute (machine-readable, API-safe),
  3. structured attributes (not just a message string).

Example:

    try:
        result = calculator.calculate(structure=s, attendance=a)
    except ZeroWorkingDaysError as e:
        return {"error": e.code, "employee_id": e.employee_id}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    HRKernelError (base)
    |
    +-- ValidationError
    |   +-- MissingFieldError
    |   +-- InvalidFieldValueError
    |
    +-- PayrollError
    |   +-- ZeroWorkingDaysError
    |   +-- AttendanceInconsistentError
    |   +-- SalaryStructureNotFoundError
    |
    +-- ConfigError
        +-- ConfigNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                         | When Raised
------------|------------------------------|------------------------------------
Validation  | MISSING_FIELD                | Required field absent or None
            | INVALID_FIELD_VALUE          | Non-numeric, NaN/Infinity, negative
------------|------------------------------|------------------------------------
Payroll     | ZERO_WORKING_DAYS            | Attendance ratio undefined
            | ATTENDANCE_INCONSISTENT      | present + lop exceeds working days
            | SALARY_STRUCTURE_NOT_FOUND   | No active structure for employee
------------|------------------------------|------------------------------------
Config      | CONFIG_NOT_FOUND             | No config set for scope/date
"""

from typing import Any


class HRKernelError(Exception):
    """
    Base exception for all HR kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "HR_KERNEL_ERROR"


# Validation exceptions


class ValidationError(HRKernelError):
    """Base exception for input validation errors."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field is absent from an input row."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str, record_type: str | None = None):
        self.field = field
        self.record_type = record_type
        where = f" in {record_type}" if record_type else ""
        super().__init__(f"Missing required field '{field}'{where}")


class InvalidFieldValueError(ValidationError):
    """A field holds a value that cannot be used in arithmetic."""

    code: str = "INVALID_FIELD_VALUE"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = repr(value)
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {value!r} ({reason})")


# Payroll exceptions


class PayrollError(HRKernelError):
    """Base exception for payroll calculation errors."""

    code: str = "PAYROLL_ERROR"


class ZeroWorkingDaysError(PayrollError):
    """Payroll requested for a period with no working days."""

    code: str = "ZERO_WORKING_DAYS"

    def __init__(self, employee_id: str | None = None):
        self.employee_id = employee_id
        who = f" for employee {employee_id}" if employee_id else ""
        super().__init__(
            f"Cannot prorate salary{who}: working_days is 0"
        )


class AttendanceInconsistentError(PayrollError):
    """Attendance counts violate present + lop <= working days."""

    code: str = "ATTENDANCE_INCONSISTENT"

    def __init__(self, working_days: int, present_days: int, lop_days: int):
        self.working_days = working_days
        self.present_days = present_days
        self.lop_days = lop_days
        super().__init__(
            f"Inconsistent attendance: present_days={present_days} + "
            f"lop_days={lop_days} exceeds working_days={working_days}"
        )


class SalaryStructureNotFoundError(PayrollError):
    """No active salary structure exists for the employee."""

    code: str = "SALARY_STRUCTURE_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"No salary structure found for employee {employee_id}")


class PayrollRunFailedError(PayrollError):
    """A payroll run inside a batch came back FAILED."""

    code: str = "PAYROLL_RUN_FAILED"

    def __init__(self, employee_id: str, period: str, reason_code: str | None):
        self.employee_id = employee_id
        self.period = period
        self.reason_code = reason_code
        super().__init__(
            f"Payroll run for employee {employee_id} ({period}) failed: {reason_code}"
        )


# Config exceptions


class ConfigError(HRKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class ConfigNotFoundError(ConfigError):
    """No configuration set matches the requested scope and date."""

    code: str = "CONFIG_NOT_FOUND"

    def __init__(self, organization: str, as_of_date: Any, config_dir: str):
        self.organization = organization
        self.as_of_date = str(as_of_date)
        self.config_dir = config_dir
        super().__init__(
            f"No configuration set found for organization='{organization}' "
            f"as_of_date={as_of_date} in {config_dir}"
        )
