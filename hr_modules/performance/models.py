"""
Performance Domain Models (``hr_modules.performance.models``).

Frozen value objects for stored insights and for the outcome of one
insight-generation request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from uuid import UUID

from hr_engines.insights import InsightType
from hr_engines.sentiment import SentimentAnalysis
from hr_engines.trend import TrendAnalysis


@dataclass(frozen=True)
class PerformanceInsightRecord:
    """A stored insight.  Insights are appended, never updated."""
    id: UUID
    employee_id: UUID
    insight_type: InsightType
    insight_title: str
    insight_summary: str
    supporting_data: dict[str, Any]
    confidence_score: float
    period_start: date
    period_end: date
    created_at: datetime | None = None


@dataclass(frozen=True)
class InsightRun:
    """What one ``generate_insights`` call looked at and produced."""
    employee_id: UUID
    period_start: date
    period_end: date
    trends: TrendAnalysis
    sentiment: SentimentAnalysis
    insights: tuple[PerformanceInsightRecord, ...] = field(default=())
    metrics_scanned: int = 0
    feedback_scanned: int = 0
    attendance_scanned: int = 0

    @property
    def count(self) -> int:
        return len(self.insights)
