"""
Attendance ORM Persistence Model (``hr_modules.attendance.orm``).

Responsibility:
    Persist one row per employee per working day and convert it into the
    engines' ``AttendanceRecord``.

Invariants enforced:
    - One row per (employee_id, date) (uq_hr_attendance_employee_date).
    - ``status`` stores the AttendanceStatus .value string.
    - ``verification_method`` records how the check-in was verified
      (``geolocation`` or ``biometric``); it is set by whoever writes the
      row, never read from ambient state.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, Float, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hr_kernel.db.base import TrackedBase


class AttendanceRecordModel(TrackedBase):
    """
    ORM model for a day of attendance.

    Guarantees:
        - ``working_hours`` is 0 for absent days.
        - Check-in/out times are None for absent days.
    """

    __tablename__ = "hr_attendance_records"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    record_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    check_in_time: Mapped[datetime | None] = mapped_column(nullable=True)
    check_out_time: Mapped[datetime | None] = mapped_column(nullable=True)
    working_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    verification_method: Mapped[str] = mapped_column(
        String(50), default="geolocation", nullable=False
    )
    biometric_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_hr_attendance_employee_date"),
        Index("idx_hr_attendance_date", "date"),
    )

    def to_record(self, employee_name: str | None = None):
        from hr_engines.records import AttendanceRecord, AttendanceStatus
        return AttendanceRecord(
            record_date=self.record_date,
            status=AttendanceStatus(self.status),
            working_hours=self.working_hours,
            employee_id=str(self.employee_id),
            employee_name=employee_name,
        )

    def __repr__(self) -> str:
        return f"<AttendanceRecordModel {self.employee_id} {self.record_date} {self.status}>"
