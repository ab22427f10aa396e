"""
Attendance Module (``hr_modules.attendance``).

Daily attendance rows.  Written by check-in flows and the seeding
service; read by anomaly detection and performance insights.
"""

from hr_modules.attendance.orm import AttendanceRecordModel

__all__ = ["AttendanceRecordModel"]
