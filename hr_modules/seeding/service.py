"""
Seeding Service (``hr_modules.seeding.service``).

Responsibility
--------------
Populate a store with demo data: employees, salary structures and monthly
payrolls, plus daily attendance, performance metrics and quarterly
feedback.

Architecture position
---------------------
**Modules layer** -- batch orchestration over ``PayrollService`` and the
ORM models, driven by ``FixtureGenerator``.

Invariants enforced
-------------------
* Each employee is seeded inside its own SAVEPOINT: all of that employee's
  rows are written or none are.  A failure is counted and the loop moves
  on to the next employee.
* Re-seeding is idempotent for salary structures, month payrolls and
  attendance days: existing rows are left untouched.
* The outer transaction is committed once, after the whole pass.

Failure modes
-------------
* Per-employee errors  -> ``SeedResult.errors`` incremented, logged.
* Errors outside the per-employee loop propagate after rollback.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_config.schema import AttendancePolicy, PayrollPolicy, SeedingPolicy
from hr_kernel.domain.calendar import add_months, iter_months, month_end
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.exceptions import PayrollRunFailedError
from hr_kernel.logging_config import get_logger
from hr_modules.attendance.orm import AttendanceRecordModel
from hr_modules.payroll.models import Employee
from hr_modules.payroll.orm import EmployeeModel
from hr_modules.payroll.service import PayrollService
from hr_modules.performance.orm import PerformanceFeedbackModel, PerformanceMetricModel
from hr_modules.seeding.generators import DemoEmployee, FixtureGenerator
from hr_modules.seeding.models import SeedResult

logger = get_logger("modules.seeding.service")


class SeedingService:
    """
    Seeds demo payroll and performance data for every active employee.

    Contract
    --------
    * ``seed_payroll_data`` / ``seed_performance_data`` / ``seed_all``
      return ``SeedResult`` tallies and commit the session.
    * Window arguments default to the ``SeedingPolicy`` lookbacks ending
      today (by the injected clock).
    """

    def __init__(
        self,
        session: Session,
        actor_id: UUID,
        clock: Clock | None = None,
        generator: FixtureGenerator | None = None,
        payroll_policy: PayrollPolicy | None = None,
        attendance_policy: AttendancePolicy | None = None,
        seeding_policy: SeedingPolicy | None = None,
    ):
        self._session = session
        self._actor_id = actor_id
        self._clock = clock or SystemClock()
        self._seeding = seeding_policy or SeedingPolicy()
        if generator is None:
            method = (attendance_policy or AttendancePolicy()).verification_method
            generator = FixtureGenerator(verification_method=method)
        elif (
            attendance_policy is not None
            and attendance_policy.verification_method != generator.verification_method
        ):
            raise ValueError(
                f"Generator verifies by {generator.verification_method!r} but the "
                f"attendance policy says {attendance_policy.verification_method!r}"
            )
        self._generator = generator
        self._verification_method = generator.verification_method
        self._payroll = PayrollService(
            session, clock=self._clock, policy=payroll_policy, auto_commit=False
        )

    # =========================================================================
    # Employees
    # =========================================================================

    def ensure_employees(self, profiles: tuple[DemoEmployee, ...] | None = None) -> list[Employee]:
        """Insert any demo employee whose code is not on file yet."""
        profiles = profiles if profiles is not None else self._generator.demo_employees()
        existing = set(self._session.scalars(select(EmployeeModel.employee_code)))
        created = 0
        for profile in profiles:
            if profile.employee_code in existing:
                continue
            self._session.add(EmployeeModel.from_dto(
                Employee(
                    id=uuid4(),
                    employee_code=profile.employee_code,
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    email=profile.email,
                    department=profile.department,
                    designation=profile.designation,
                    hire_date=profile.hire_date,
                ),
                created_by_id=self._actor_id,
            ))
            created += 1
        self._session.commit()
        logger.info("demo_employees_ensured", extra={
            "created_count": created,
            "existing": len(existing),
        })
        return self.active_employees()

    def active_employees(self) -> list[Employee]:
        stmt = (
            select(EmployeeModel)
            .where(EmployeeModel.is_active.is_(True))
            .order_by(EmployeeModel.employee_code)
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]

    # =========================================================================
    # Batch loop
    # =========================================================================

    def _run(self, job: str, seed_one, start: date, end: date) -> SeedResult:
        employees = self.active_employees()
        logger.info("seeding_started", extra={
            "job": job,
            "employee_count": len(employees),
            "start": start.isoformat(),
            "end": end.isoformat(),
        })

        success = 0
        errors = 0
        try:
            for employee in employees:
                try:
                    with self._session.begin_nested():
                        seed_one(employee, start, end)
                    success += 1
                except Exception as exc:
                    errors += 1
                    logger.warning("seed_employee_failed", extra={
                        "job": job,
                        "employee_id": str(employee.id),
                        "error_code": getattr(exc, "code", type(exc).__name__),
                    }, exc_info=True)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        result = SeedResult(success=success, errors=errors)
        logger.info("seeding_completed", extra={
            "job": job,
            "success": result.success,
            "errors": result.errors,
        })
        return result

    # =========================================================================
    # Payroll
    # =========================================================================

    def _payroll_timestamp(self, year: int, month: int) -> datetime:
        """Month-end noon, or now for the current month."""
        stamp = datetime.combine(month_end(year, month), time(12), tzinfo=timezone.utc)
        return min(stamp, self._clock.now())

    def _seed_employee_payroll(self, employee: Employee, start: date, end: date) -> None:
        if not self._payroll.has_active_salary_structure(employee.id):
            self._payroll.revise_salary_structure(
                employee.id,
                self._generator.salary_structure(),
                actor_id=self._actor_id,
                effective_from=self._clock.today(),
            )

        for year, month in iter_months(start, end):
            if self._payroll.get_payroll(employee.id, month, year) is not None:
                continue
            outcome = self._payroll.run_payroll(
                employee_id=employee.id,
                month=month,
                year=year,
                attendance=self._generator.attendance_sample(),
                actor_id=self._actor_id,
                adjustments=self._generator.adjustments(),
                finalize=True,
                created_at=self._payroll_timestamp(year, month),
            )
            if not outcome.is_success:
                raise PayrollRunFailedError(
                    str(employee.id), f"{year}-{month:02d}", outcome.error_code
                )

    def seed_payroll_data(self, start: date | None = None, end: date | None = None) -> SeedResult:
        """Salary structure (when missing) and one payroll per month in the window."""
        end = end or self._clock.today()
        start = start or add_months(end, -self._seeding.payroll_months)
        return self._run("payroll", self._seed_employee_payroll, start, end)

    # =========================================================================
    # Performance
    # =========================================================================

    def _seed_employee_attendance(self, employee: Employee, start: date, end: date) -> None:
        taken = set(self._session.scalars(
            select(AttendanceRecordModel.record_date).where(
                AttendanceRecordModel.employee_id == employee.id,
                AttendanceRecordModel.record_date >= start,
                AttendanceRecordModel.record_date <= end,
            )
        ))
        self._session.add_all(
            AttendanceRecordModel(
                employee_id=employee.id,
                record_date=day.record_date,
                status=day.status.value,
                check_in_time=day.check_in_time,
                check_out_time=day.check_out_time,
                working_hours=day.working_hours,
                verification_method=self._verification_method,
                biometric_verified=day.biometric_verified,
                created_by_id=self._actor_id,
            )
            for day in self._generator.daily_attendance(start, end)
            if day.record_date not in taken
        )

    def _seed_employee_performance(self, employee: Employee, start: date, end: date) -> None:
        measured = {
            (metric_type, measured_on)
            for metric_type, measured_on in self._session.execute(
                select(PerformanceMetricModel.metric_type, PerformanceMetricModel.measurement_date)
                .where(PerformanceMetricModel.employee_id == employee.id)
            )
        }
        self._session.add_all(
            PerformanceMetricModel(
                employee_id=employee.id,
                metric_type=m.metric_type,
                metric_value=m.metric_value,
                target_value=m.target_value,
                measurement_date=m.measurement_date,
                quarter=m.quarter,
                year=m.year,
                notes=m.notes,
                created_by_id=self._actor_id,
            )
            for m in self._generator.performance_metrics(start, end)
            if (m.metric_type, m.measurement_date) not in measured
        )

        reviewed = set(self._session.scalars(
            select(PerformanceFeedbackModel.review_period_start)
            .where(PerformanceFeedbackModel.employee_id == employee.id)
        ))
        self._session.add_all(
            PerformanceFeedbackModel(
                employee_id=employee.id,
                feedback_type=f.feedback_type,
                feedback_text=f.feedback_text,
                rating=f.rating,
                review_period_start=f.review_period_start,
                review_period_end=f.review_period_end,
                created_by_id=self._actor_id,
            )
            for f in self._generator.quarterly_feedback(start, end)
            if f.review_period_start not in reviewed
        )

        attendance_start = max(start, end - timedelta(days=self._seeding.attendance_days))
        self._seed_employee_attendance(employee, attendance_start, end)
        self._session.flush()

    def seed_performance_data(
        self, start: date | None = None, end: date | None = None
    ) -> SeedResult:
        """Metrics, feedback and daily attendance for the window."""
        end = end or self._clock.today()
        start = start or add_months(end, -self._seeding.performance_months)
        return self._run("performance", self._seed_employee_performance, start, end)

    def seed_all(self, start: date | None = None, end: date | None = None) -> dict[str, SeedResult]:
        """Payroll then performance; each pass keeps its own tally."""
        return {
            "payroll": self.seed_payroll_data(start, end),
            "performance": self.seed_performance_data(start, end),
        }
