"""
hr_engines.payroll -- Monthly salary proration, statutory deductions, net pay.

Responsibility:
    Turn a ``SalaryStructure`` and an ``AttendancePeriod`` (plus optional
    manual ``PayrollAdjustments``) into an itemized ``PayrollResult``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import hr_kernel/domain, hr_kernel/exceptions and hr_config.schema.
    Consumed by ``hr_modules.payroll.service`` and the seeding service.

Invariants enforced:
    - total_earnings is the sum of every earnings line.
    - net_pay == total_earnings - total_deductions.
    - Full attendance leaves every prorated line equal to its source amount.
    - Every amount is Decimal, rounded half-up to a whole currency unit.
    - Purity: no randomness, no clock, no I/O.  Random bonuses and other
      deductions belong to ``hr_modules.seeding.generators``.

Failure modes:
    - ZeroWorkingDaysError when the period has no working days.
    - AttendanceInconsistentError / ValueError from the input dataclasses
      when counts or amounts are malformed.
    - A negative net pay is returned as-is and logged as
      ``payroll_negative_net_pay``.

Usage:
    calculator = PayrollCalculator()
    result = calculator.calculate(
        structure=SalaryStructure.of(basic_salary=30000, hra=12000, ...),
        attendance=AttendancePeriod(working_days=22, present_days=22),
    )
    result.net_pay  # Decimal("47700")
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any

from hr_config.schema import PayrollPolicy
from hr_engines.tracer import traced_engine
from hr_kernel.domain.rounding import round_money
from hr_kernel.exceptions import AttendanceInconsistentError, ZeroWorkingDaysError
from hr_kernel.logging_config import get_logger

logger = get_logger("engines.payroll")

ZERO = Decimal("0")


def _to_amount(name: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got bool")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    if amount < ZERO:
        raise ValueError(f"{name} cannot be negative, got {value!r}")
    return amount


@dataclass(frozen=True)
class SalaryStructure:
    """
    Monthly compensation breakdown for one employee.

    Immutable once effective; a revision is a new structure, never an edit.
    Amounts given as int/str are normalized to Decimal.
    """

    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    transport_allowance: Decimal
    medical_allowance: Decimal
    other_allowances: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _to_amount(f.name, getattr(self, f.name)))

    @classmethod
    def of(cls, **amounts: Any) -> SalaryStructure:
        """Build from plain numbers; absent components default to zero."""
        names = [f.name for f in fields(cls)]
        return cls(**{name: amounts.get(name, 0) for name in names})

    @property
    def ctc(self) -> Decimal:
        """Monthly cost to company: the sum of all six components."""
        return (
            self.basic_salary
            + self.hra
            + self.special_allowance
            + self.transport_allowance
            + self.medical_allowance
            + self.other_allowances
        )


@dataclass(frozen=True)
class AttendancePeriod:
    """Day counts for one pay period.

    ``leave_days`` is whatever remains once present and LOP days are
    taken out of the working days.
    """

    working_days: int
    present_days: int
    lop_days: int = 0

    def __post_init__(self) -> None:
        for name in ("working_days", "present_days", "lop_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} cannot be negative, got {value}")
        if self.present_days + self.lop_days > self.working_days:
            raise AttendanceInconsistentError(
                self.working_days, self.present_days, self.lop_days
            )

    @property
    def leave_days(self) -> int:
        return self.working_days - self.present_days - self.lop_days


@dataclass(frozen=True)
class PayrollAdjustments:
    """Manual overrides entered by payroll staff."""

    bonus: Decimal = ZERO
    manual_deductions: Decimal = ZERO

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _to_amount(f.name, getattr(self, f.name)))


@dataclass(frozen=True)
class PayrollResult:
    """
    Itemized monthly payroll.

    Field names are the domain names; ``to_row()`` maps them onto the
    store's column names (``pf``, ``tds``, ``esi``, ``other_deductions``).
    """

    # Earnings
    basic_salary: Decimal
    hra: Decimal
    special_allowance: Decimal
    transport_allowance: Decimal
    medical_allowance: Decimal
    other_allowances: Decimal
    bonus: Decimal
    # Deductions
    provident_fund: Decimal
    tax: Decimal
    employee_state_insurance: Decimal
    lop_deduction: Decimal
    manual_deductions: Decimal
    # Totals
    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    # Inputs echoed for persistence
    attendance_ratio: Decimal
    working_days: int
    present_days: int
    lop_days: int

    @property
    def earnings(self) -> tuple[Decimal, ...]:
        return (
            self.basic_salary,
            self.hra,
            self.special_allowance,
            self.transport_allowance,
            self.medical_allowance,
            self.other_allowances,
            self.bonus,
        )

    @property
    def deductions(self) -> tuple[Decimal, ...]:
        return (
            self.provident_fund,
            self.tax,
            self.employee_state_insurance,
            self.lop_deduction,
            self.manual_deductions,
        )

    def to_row(self) -> dict[str, Any]:
        """Flatten to the payroll table's column names."""
        return {
            "basic_salary": self.basic_salary,
            "hra": self.hra,
            "special_allowance": self.special_allowance,
            "transport_allowance": self.transport_allowance,
            "medical_allowance": self.medical_allowance,
            "other_allowances": self.other_allowances,
            "bonus": self.bonus,
            "total_earnings": self.total_earnings,
            "pf": self.provident_fund,
            "tds": self.tax,
            "esi": self.employee_state_insurance,
            "lop_deduction": self.lop_deduction,
            "other_deductions": self.manual_deductions,
            "total_deductions": self.total_deductions,
            "net_pay": self.net_pay,
            "working_days": self.working_days,
            "present_days": self.present_days,
            "lop_days": self.lop_days,
        }


class PayrollCalculator:
    """
    Deterministic monthly payroll calculator.

    Contract:
        Same structure, attendance, adjustments and policy always produce
        the same ``PayrollResult``.

    Guarantees:
        - basic, HRA and special allowance are prorated by
          present_days / working_days.
        - transport is paid in full once present_days exceeds
          ``policy.transport_full_after_days``, otherwise prorated.
        - medical and other allowances are never prorated.
        - LOP is charged against the unprorated basic salary.
    """

    def __init__(self, policy: PayrollPolicy | None = None):
        self._policy = policy or PayrollPolicy()

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    @traced_engine(
        "payroll", "1.0", fingerprint_fields=("structure", "attendance", "adjustments")
    )
    def calculate(
        self,
        *,
        structure: SalaryStructure,
        attendance: AttendancePeriod,
        adjustments: PayrollAdjustments | None = None,
        employee_id: str | None = None,
    ) -> PayrollResult:
        """Compute one month of pay.

        Raises:
            ZeroWorkingDaysError: If ``attendance.working_days`` is 0.
        """
        if attendance.working_days == 0:
            raise ZeroWorkingDaysError(employee_id)

        policy = self._policy
        adjustments = adjustments or PayrollAdjustments()
        working = Decimal(attendance.working_days)
        present = Decimal(attendance.present_days)

        def prorate(amount: Decimal) -> Decimal:
            return round_money(amount * present / working)

        basic = prorate(structure.basic_salary)
        hra = prorate(structure.hra)
        special = prorate(structure.special_allowance)
        if attendance.present_days > policy.transport_full_after_days:
            transport = round_money(structure.transport_allowance)
        else:
            transport = prorate(structure.transport_allowance)
        medical = round_money(structure.medical_allowance)
        other = round_money(structure.other_allowances)
        bonus = round_money(adjustments.bonus)

        total_earnings = basic + hra + special + transport + medical + other + bonus

        provident_fund = round_money(basic * policy.provident_fund_rate)
        tax = (
            round_money(total_earnings * policy.tax_rate)
            if total_earnings > policy.tax_threshold
            else ZERO
        )
        esi = (
            round_money(total_earnings * policy.esi_rate)
            if total_earnings < policy.esi_threshold
            else ZERO
        )
        lop_deduction = round_money(
            structure.basic_salary / working * Decimal(attendance.lop_days)
        )
        manual = round_money(adjustments.manual_deductions)

        total_deductions = provident_fund + tax + esi + lop_deduction + manual
        net_pay = total_earnings - total_deductions

        if net_pay < ZERO:
            logger.warning(
                "payroll_negative_net_pay",
                extra={
                    "employee_id": employee_id,
                    "total_earnings": str(total_earnings),
                    "total_deductions": str(total_deductions),
                    "net_pay": str(net_pay),
                },
            )

        return PayrollResult(
            basic_salary=basic,
            hra=hra,
            special_allowance=special,
            transport_allowance=transport,
            medical_allowance=medical,
            other_allowances=other,
            bonus=bonus,
            provident_fund=provident_fund,
            tax=tax,
            employee_state_insurance=esi,
            lop_deduction=lop_deduction,
            manual_deductions=manual,
            total_earnings=total_earnings,
            total_deductions=total_deductions,
            net_pay=net_pay,
            attendance_ratio=present / working,
            working_days=attendance.working_days,
            present_days=attendance.present_days,
            lop_days=attendance.lop_days,
        )
