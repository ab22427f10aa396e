"""
Performance ORM Persistence Models (``hr_modules.performance.orm``).

Responsibility:
    Persist performance metrics, review feedback and generated insights,
    and convert stored rows into the engines' input records.

Invariants enforced:
    - Metric values and ratings are analytic scores, stored as Float.
    - ``supporting_data`` is stored as JSON exactly as the generator built
      it (camelCase keys included).
    - Insight rows are append-only; regeneration inserts new rows.
"""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Date, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hr_kernel.db.base import TrackedBase


class PerformanceMetricModel(TrackedBase):
    """One measurement of one metric for one employee."""

    __tablename__ = "hr_performance_metrics"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    metric_type: Mapped[str] = mapped_column(String(100), nullable=False)
    metric_value: Mapped[float] = mapped_column(Float, nullable=False)
    target_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    measurement_date: Mapped[date] = mapped_column(Date, nullable=False)
    quarter: Mapped[int | None] = mapped_column(nullable=True)
    year: Mapped[int | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_hr_metric_employee_date", "employee_id", "measurement_date"),
    )

    def to_sample(self):
        from hr_engines.records import MetricSample
        return MetricSample(
            metric_type=self.metric_type,
            metric_value=self.metric_value,
            measurement_date=self.measurement_date,
            target_value=self.target_value,
        )

    def __repr__(self) -> str:
        return f"<PerformanceMetricModel {self.metric_type}={self.metric_value} {self.measurement_date}>"


class PerformanceFeedbackModel(TrackedBase):
    """Review feedback for one employee and one review period."""

    __tablename__ = "hr_performance_feedback"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    feedback_type: Mapped[str] = mapped_column(String(50), default="self_review", nullable=False)
    feedback_text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    review_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    review_period_end: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("idx_hr_feedback_employee_period", "employee_id", "review_period_start"),
    )

    def to_record(self):
        from hr_engines.records import FeedbackRecord
        return FeedbackRecord(
            feedback_text=self.feedback_text,
            review_period_start=self.review_period_start,
            review_period_end=self.review_period_end,
            rating=self.rating,
            feedback_type=self.feedback_type,
        )


class PerformanceInsightModel(TrackedBase):
    """
    ORM model for ``PerformanceInsightRecord``.

    Guarantees:
        - ``insight_type`` stores the InsightType .value string.
    """

    __tablename__ = "hr_performance_insights"

    employee_id: Mapped[UUID] = mapped_column(ForeignKey("hr_employees.id"), nullable=False)
    insight_type: Mapped[str] = mapped_column(String(50), nullable=False)
    insight_title: Mapped[str] = mapped_column(String(255), nullable=False)
    insight_summary: Mapped[str] = mapped_column(Text, nullable=False)
    supporting_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("idx_hr_insight_employee", "employee_id", "period_end"),
    )

    def to_dto(self):
        from hr_engines.insights import InsightType
        from hr_modules.performance.models import PerformanceInsightRecord
        return PerformanceInsightRecord(
            id=self.id,
            employee_id=self.employee_id,
            insight_type=InsightType(self.insight_type),
            insight_title=self.insight_title,
            insight_summary=self.insight_summary,
            supporting_data=self.supporting_data,
            confidence_score=self.confidence_score,
            period_start=self.period_start,
            period_end=self.period_end,
            created_at=self.created_at,
        )

    @classmethod
    def from_insight(
        cls,
        insight,
        employee_id: UUID,
        period_start: date,
        period_end: date,
        created_by_id: UUID,
    ) -> "PerformanceInsightModel":
        """Build a row from an engine ``Insight``."""
        return cls(
            employee_id=employee_id,
            insight_type=insight.insight_type.value,
            insight_title=insight.title,
            insight_summary=insight.summary,
            supporting_data=insight.supporting_data,
            confidence_score=insight.confidence_score,
            period_start=period_start,
            period_end=period_end,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<PerformanceInsightModel {self.employee_id} {self.insight_type}: {self.insight_title}>"
