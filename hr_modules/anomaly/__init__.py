"""
Anomaly Module (``hr_modules.anomaly``).

Fetches payroll history and attendance from the store and runs the
z-score scans in ``hr_engines.anomaly``.  Findings are returned, not
persisted.
"""

from hr_modules.anomaly.models import AnomalyReport, DetectionType
from hr_modules.anomaly.service import AnomalyDetectionService

__all__ = ["AnomalyReport", "DetectionType", "AnomalyDetectionService"]
