"""
Payroll Module Service (``hr_modules.payroll.service``).

Responsibility
--------------
Orchestrates payroll operations -- salary structure lookup and revision,
monthly payroll runs, and row-level calculation -- by delegating the
arithmetic to ``hr_engines.payroll.PayrollCalculator`` and persistence to
the ORM models in ``hr_modules.payroll.orm``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``PayrollService`` is the sole public
entry point for payroll operations.

Invariants enforced
-------------------
* Each public method owns the transaction boundary when ``auto_commit`` is
  True (commit on success, rollback on failure or exception).  With
  ``auto_commit=False`` the caller owns it (used by the seeding service
  inside per-employee savepoints).
* A salary structure is never edited: revisions close the active row and
  insert a new one.
* At most one payroll per employee per month; re-running returns the
  stored payroll.

Failure modes
-------------
* Calculation errors (``PayrollError``)  -> ``PayrollRunOutcome`` with
  ``status == FAILED`` and the error code; nothing is written.
* Unexpected exception  -> session rolled back, exception re-raised.
* ``get_active_salary_structure`` raises ``SalaryStructureNotFoundError``.

Usage::

    service = PayrollService(session, clock=clock)
    outcome = service.run_payroll(
        employee_id=employee.id, month=3, year=2024,
        attendance=AttendancePeriod(working_days=22, present_days=21, lop_days=1),
        actor_id=actor_id,
    )
    if outcome.is_success:
        print(outcome.payroll.net_pay)
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_config.schema import PayrollPolicy
from hr_engines.payroll import (
    AttendancePeriod,
    PayrollAdjustments,
    PayrollCalculator,
    PayrollResult,
    SalaryStructure,
)
from hr_ingestion.validators import (
    adjustments_from_row,
    attendance_period_from_row,
    salary_structure_from_row,
)
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.exceptions import PayrollError, SalaryStructureNotFoundError
from hr_kernel.logging_config import get_logger
from hr_modules.payroll.models import (
    Payroll,
    PayrollRunOutcome,
    PayrollRunStatus,
    PayrollStatus,
    SalaryStructureRecord,
)
from hr_modules.payroll.orm import PayrollModel, SalaryStructureModel

logger = get_logger("modules.payroll.service")


class PayrollService:
    """
    Orchestrates payroll operations through the payroll engine.

    Contract
    --------
    * ``run_payroll`` returns a ``PayrollRunOutcome``; callers inspect
      ``outcome.is_success``.
    * ``calculate`` and ``compute_payroll_from_rows`` are pure: they never
      touch the session.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * Policy is injectable; defaults to the documented statutory rates.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        policy: PayrollPolicy | None = None,
        auto_commit: bool = True,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._calculator = PayrollCalculator(policy)
        self._auto_commit = auto_commit

    # =========================================================================
    # Transaction boundary
    # =========================================================================

    def _commit(self) -> None:
        if self._auto_commit:
            self._session.commit()
        else:
            self._session.flush()

    def _rollback(self) -> None:
        if self._auto_commit:
            self._session.rollback()

    # =========================================================================
    # Salary structures
    # =========================================================================

    def _active_structure_model(self, employee_id: UUID) -> SalaryStructureModel | None:
        stmt = (
            select(SalaryStructureModel)
            .where(
                SalaryStructureModel.employee_id == employee_id,
                SalaryStructureModel.is_active.is_(True),
            )
            .order_by(SalaryStructureModel.effective_from.desc())
        )
        return self._session.scalars(stmt).first()

    def get_active_salary_structure(self, employee_id: UUID) -> SalaryStructureRecord:
        """Return the employee's active salary structure.

        Raises:
            SalaryStructureNotFoundError: If the employee has none.
        """
        model = self._active_structure_model(employee_id)
        if model is None:
            raise SalaryStructureNotFoundError(str(employee_id))
        return model.to_dto()

    def has_active_salary_structure(self, employee_id: UUID) -> bool:
        return self._active_structure_model(employee_id) is not None

    def revise_salary_structure(
        self,
        employee_id: UUID,
        structure: SalaryStructure,
        actor_id: UUID,
        effective_from: date | None = None,
    ) -> SalaryStructureRecord:
        """Make *structure* the employee's active salary structure.

        The previously active structure (if any) is closed the day before
        ``effective_from``; its amounts are left untouched.
        """
        effective_from = effective_from or self._clock.today()
        try:
            previous = self._active_structure_model(employee_id)
            if previous is not None:
                previous.is_active = False
                previous.effective_to = max(
                    previous.effective_from, effective_from - timedelta(days=1)
                )
                previous.updated_by_id = actor_id

            record = SalaryStructureRecord(
                id=uuid4(),
                employee_id=employee_id,
                structure=structure,
                effective_from=effective_from,
            )
            self._session.add(SalaryStructureModel.from_dto(record, created_by_id=actor_id))
            self._commit()

            logger.info("salary_structure_revised", extra={
                "employee_id": str(employee_id),
                "structure_id": str(record.id),
                "superseded_id": str(previous.id) if previous is not None else None,
                "ctc": str(structure.ctc),
                "effective_from": effective_from.isoformat(),
            })
            return record

        except Exception:
            self._rollback()
            raise

    # =========================================================================
    # Calculation
    # =========================================================================

    def calculate(
        self,
        structure: SalaryStructure,
        attendance: AttendancePeriod,
        adjustments: PayrollAdjustments | None = None,
        employee_id: str | None = None,
    ) -> PayrollResult:
        """Pure calculation; nothing is read or written."""
        return self._calculator.calculate(
            structure=structure,
            attendance=attendance,
            adjustments=adjustments,
            employee_id=employee_id,
        )

    def compute_payroll_from_rows(
        self,
        structure_row: Mapping[str, Any],
        attendance_row: Mapping[str, Any],
        adjustments_row: Mapping[str, Any] | None = None,
    ) -> PayrollResult:
        """Validate raw store rows, then calculate.

        Raises:
            MissingFieldError / InvalidFieldValueError: On a malformed row.
            ZeroWorkingDaysError: If the attendance row has no working days.
        """
        return self.calculate(
            structure=salary_structure_from_row(structure_row),
            attendance=attendance_period_from_row(attendance_row),
            adjustments=adjustments_from_row(adjustments_row or {}),
        )

    # =========================================================================
    # Payroll runs
    # =========================================================================

    def get_payroll(self, employee_id: UUID, month: int, year: int) -> Payroll | None:
        stmt = select(PayrollModel).where(
            PayrollModel.employee_id == employee_id,
            PayrollModel.month == month,
            PayrollModel.year == year,
        )
        model = self._session.scalars(stmt).first()
        return model.to_dto() if model is not None else None

    def run_payroll(
        self,
        employee_id: UUID,
        month: int,
        year: int,
        attendance: AttendancePeriod,
        actor_id: UUID,
        adjustments: PayrollAdjustments | None = None,
        finalize: bool = False,
        created_at: datetime | None = None,
    ) -> PayrollRunOutcome:
        """Calculate and store one employee's payroll for one month.

        Idempotent per (employee, month, year): an existing payroll is
        returned unchanged with ``ALREADY_CALCULATED``.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1..12, got {month}")

        try:
            existing = self.get_payroll(employee_id, month, year)
            if existing is not None:
                logger.info("payroll_already_calculated", extra={
                    "employee_id": str(employee_id),
                    "period": f"{year}-{month:02d}",
                    "payroll_id": str(existing.id),
                })
                return PayrollRunOutcome(
                    status=PayrollRunStatus.ALREADY_CALCULATED,
                    employee_id=employee_id,
                    month=month,
                    year=year,
                    payroll=existing,
                )

            logger.info("payroll_run_started", extra={
                "employee_id": str(employee_id),
                "period": f"{year}-{month:02d}",
                "working_days": attendance.working_days,
                "present_days": attendance.present_days,
                "lop_days": attendance.lop_days,
            })

            try:
                structure = self.get_active_salary_structure(employee_id).structure
                result = self.calculate(
                    structure, attendance, adjustments, employee_id=str(employee_id)
                )
            except PayrollError as exc:
                self._rollback()
                logger.warning("payroll_run_failed", extra={
                    "employee_id": str(employee_id),
                    "period": f"{year}-{month:02d}",
                    "error_code": exc.code,
                })
                return PayrollRunOutcome(
                    status=PayrollRunStatus.FAILED,
                    employee_id=employee_id,
                    month=month,
                    year=year,
                    error_code=exc.code,
                    message=str(exc),
                )

            now = self._clock.now()
            model = PayrollModel.from_result(
                result,
                employee_id=employee_id,
                month=month,
                year=year,
                created_by_id=actor_id,
                status=(PayrollStatus.FINALIZED if finalize else PayrollStatus.DRAFT).value,
                finalized_at=now if finalize else None,
                created_at=created_at or now,
            )
            self._session.add(model)
            self._commit()

            logger.info("payroll_run_committed", extra={
                "employee_id": str(employee_id),
                "period": f"{year}-{month:02d}",
                "payroll_id": str(model.id),
                "total_earnings": str(result.total_earnings),
                "total_deductions": str(result.total_deductions),
                "net_pay": str(result.net_pay),
            })
            return PayrollRunOutcome(
                status=PayrollRunStatus.CALCULATED,
                employee_id=employee_id,
                month=month,
                year=year,
                payroll=model.to_dto(),
            )

        except Exception:
            self._rollback()
            raise
