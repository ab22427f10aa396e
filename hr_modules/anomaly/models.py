"""
Anomaly Domain Models (``hr_modules.anomaly.models``).

Frozen value objects returned by ``AnomalyDetectionService``.  Anomalies
are derived data: they are recomputed on every request and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from hr_engines.anomaly import Anomaly, Severity


class DetectionType(Enum):
    """Which scans to run."""
    PAYROLL = "payroll"
    ATTENDANCE = "attendance"
    ALL = "all"


@dataclass(frozen=True)
class AnomalyReport:
    """Findings of one detection request."""
    detection_type: DetectionType
    detected_at: datetime
    anomalies: tuple[Anomaly, ...] = field(default=())
    payroll_rows_scanned: int = 0
    attendance_rows_scanned: int = 0

    @property
    def count(self) -> int:
        return len(self.anomalies)

    def by_severity(self, severity: Severity) -> tuple[Anomaly, ...]:
        return tuple(a for a in self.anomalies if a.severity == severity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "detectionType": self.detection_type.value,
            "detectedAt": self.detected_at.isoformat(),
            "anomalies": [a.to_dict() for a in self.anomalies],
        }
