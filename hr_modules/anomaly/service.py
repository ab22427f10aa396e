"""
Anomaly Detection Service (``hr_modules.anomaly.service``).

Responsibility
--------------
Fetch recent payroll history and attendance (optionally for one employee),
convert the rows into engine records, and run the z-score scans.

Architecture position
---------------------
**Modules layer** -- read-only glue around ``hr_engines.anomaly``.

Invariants enforced
-------------------
* Read-only: the service never writes, so it never commits.
* Fetches run one after another on the caller's session.
* Lookback windows are measured from the injected clock.

Failure modes
-------------
* ``ValueError`` for an unknown detection type.
* Database errors propagate unchanged.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_config.schema import AnomalyPolicy
from hr_engines.anomaly import Anomaly, AnomalyDetector
from hr_engines.records import PayrollHistoryEntry
from hr_kernel.domain.calendar import add_months
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.logging_config import get_logger
from hr_modules.anomaly.models import AnomalyReport, DetectionType
from hr_modules.attendance.orm import AttendanceRecordModel
from hr_modules.payroll.orm import EmployeeModel, PayrollModel

logger = get_logger("modules.anomaly.service")


class AnomalyDetectionService:
    """
    Runs payroll and attendance anomaly scans over stored data.

    Contract
    --------
    * ``detect`` returns an ``AnomalyReport``; an empty report is a valid
      outcome (too little data, or nothing unusual).
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        policy: AnomalyPolicy | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._detector = AnomalyDetector(policy)

    def detect(
        self,
        detection_type: DetectionType | str,
        employee_id: UUID | None = None,
        payroll_months: int | None = None,
        attendance_days: int | None = None,
    ) -> AnomalyReport:
        """Run the requested scans.

        Args:
            detection_type: ``payroll``, ``attendance`` or ``all``.
            employee_id: Restrict to one employee; None scans everyone.
            payroll_months: Payroll lookback; defaults to the policy's.
            attendance_days: Attendance lookback; defaults to the policy's.
        """
        detection_type = DetectionType(detection_type)
        policy = self._detector.policy
        months = payroll_months if payroll_months is not None else policy.payroll_lookback_months
        days = (
            attendance_days if attendance_days is not None else policy.attendance_lookback_days
        )

        logger.info("anomaly_detection_started", extra={
            "detection_type": detection_type.value,
            "employee_id": str(employee_id) if employee_id else None,
            "payroll_months": months,
            "attendance_days": days,
        })

        anomalies: list[Anomaly] = []
        payroll_rows = 0
        attendance_rows = 0

        if detection_type in (DetectionType.PAYROLL, DetectionType.ALL):
            history = self._fetch_payroll_history(employee_id, months)
            payroll_rows = len(history)
            anomalies.extend(self._detector.detect_payroll_anomalies(history=history))

        if detection_type in (DetectionType.ATTENDANCE, DetectionType.ALL):
            records = self._fetch_attendance(employee_id, days)
            attendance_rows = len(records)
            anomalies.extend(
                self._detector.detect_attendance_anomalies(records=records, lookback_days=days)
            )

        report = AnomalyReport(
            detection_type=detection_type,
            detected_at=self._clock.now(),
            anomalies=tuple(anomalies),
            payroll_rows_scanned=payroll_rows,
            attendance_rows_scanned=attendance_rows,
        )
        logger.info("anomaly_detection_completed", extra={
            "detection_type": detection_type.value,
            "anomaly_count": report.count,
            "payroll_rows_scanned": payroll_rows,
            "attendance_rows_scanned": attendance_rows,
        })
        return report

    def _fetch_payroll_history(
        self, employee_id: UUID | None, months: int
    ) -> list[PayrollHistoryEntry]:
        since = add_months(self._clock.now(), -months)
        stmt = (
            select(PayrollModel, EmployeeModel)
            .join(EmployeeModel, PayrollModel.employee_id == EmployeeModel.id)
            .where(PayrollModel.created_at >= since)
            .order_by(PayrollModel.created_at)
        )
        if employee_id is not None:
            stmt = stmt.where(PayrollModel.employee_id == employee_id)

        return [
            PayrollHistoryEntry(
                employee_id=str(payroll.employee_id),
                created_at=payroll.created_at,
                net_pay=payroll.net_pay,
                total_deductions=payroll.total_deductions,
                working_days=payroll.working_days,
                employee_name=employee.full_name,
            )
            for payroll, employee in self._session.execute(stmt).all()
        ]

    def _fetch_attendance(self, employee_id: UUID | None, days: int):
        since = self._clock.today() - timedelta(days=days)
        stmt = (
            select(AttendanceRecordModel, EmployeeModel)
            .join(EmployeeModel, AttendanceRecordModel.employee_id == EmployeeModel.id)
            .where(AttendanceRecordModel.record_date >= since)
            .order_by(AttendanceRecordModel.record_date)
        )
        if employee_id is not None:
            stmt = stmt.where(AttendanceRecordModel.employee_id == employee_id)

        return [
            record.to_record(employee_name=employee.full_name)
            for record, employee in self._session.execute(stmt).all()
        ]
