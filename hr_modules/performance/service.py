"""
Performance Insight Service (``hr_modules.performance.service``).

Responsibility
--------------
Fetch one employee's metrics, feedback and attendance for a trailing
period, run the trend, sentiment and insight engines, and append the
resulting insights to the store.

Architecture position
---------------------
**Modules layer** -- thin glue over ``hr_engines.trend``,
``hr_engines.sentiment`` and ``hr_engines.insights``.

Invariants enforced
-------------------
* The period is ``[today - period_months, today]`` by the injected clock.
* Feedback counts only when its whole review period lies inside the
  analysed period.
* All insights of one call are written in one transaction.

Failure modes
-------------
* ``ValueError`` for a non-positive ``period_months``.
* Unexpected exception  -> session rolled back, exception re-raised.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from hr_config.schema import InsightPolicy, SentimentPolicy, TrendPolicy
from hr_engines.insights import InsightContext, InsightGenerator
from hr_engines.sentiment import FeedbackSentimentAnalyzer
from hr_engines.trend import TrendAnalyzer
from hr_kernel.domain.calendar import add_months
from hr_kernel.domain.clock import Clock, SystemClock
from hr_kernel.logging_config import get_logger
from hr_modules.attendance.orm import AttendanceRecordModel
from hr_modules.performance.models import InsightRun, PerformanceInsightRecord
from hr_modules.performance.orm import (
    PerformanceFeedbackModel,
    PerformanceInsightModel,
    PerformanceMetricModel,
)

logger = get_logger("modules.performance.service")


class PerformanceInsightService:
    """
    Generates and stores performance insights for one employee at a time.

    Contract
    --------
    * ``generate_insights`` returns an ``InsightRun`` carrying the stored
      records; zero insights is a valid outcome.
    * ``list_insights`` is read-only.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        trend_policy: TrendPolicy | None = None,
        sentiment_policy: SentimentPolicy | None = None,
        insight_policy: InsightPolicy | None = None,
        auto_commit: bool = True,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._trends = TrendAnalyzer(trend_policy)
        self._sentiment = FeedbackSentimentAnalyzer(sentiment_policy)
        self._generator = InsightGenerator(insight_policy)
        self._auto_commit = auto_commit

    def generate_insights(
        self,
        employee_id: UUID,
        actor_id: UUID,
        period_months: int | None = None,
    ) -> InsightRun:
        """Analyse the trailing period and append the insights it yields."""
        period_months = (
            period_months
            if period_months is not None
            else self._generator.policy.default_period_months
        )
        if period_months <= 0:
            raise ValueError(f"period_months must be positive, got {period_months}")

        period_end = self._clock.today()
        period_start = add_months(period_end, -period_months)

        logger.info("insight_generation_started", extra={
            "employee_id": str(employee_id),
            "period_start": period_start.isoformat(),
            "period_end": period_end.isoformat(),
        })

        try:
            metrics = [
                m.to_sample() for m in self._session.scalars(
                    select(PerformanceMetricModel)
                    .where(
                        PerformanceMetricModel.employee_id == employee_id,
                        PerformanceMetricModel.measurement_date >= period_start,
                        PerformanceMetricModel.measurement_date <= period_end,
                    )
                    .order_by(PerformanceMetricModel.measurement_date)
                )
            ]
            feedback = [
                f.to_record() for f in self._session.scalars(
                    select(PerformanceFeedbackModel)
                    .where(
                        PerformanceFeedbackModel.employee_id == employee_id,
                        PerformanceFeedbackModel.review_period_start >= period_start,
                        PerformanceFeedbackModel.review_period_end <= period_end,
                    )
                    .order_by(PerformanceFeedbackModel.review_period_start)
                )
            ]
            attendance = [
                a.to_record() for a in self._session.scalars(
                    select(AttendanceRecordModel)
                    .where(
                        AttendanceRecordModel.employee_id == employee_id,
                        AttendanceRecordModel.record_date >= period_start,
                        AttendanceRecordModel.record_date <= period_end,
                    )
                    .order_by(AttendanceRecordModel.record_date)
                )
            ]

            trends = self._trends.analyze(
                metrics=metrics, attendance=attendance, as_of=period_end
            )
            sentiment = self._sentiment.analyze(feedback=feedback)
            insights = self._generator.generate(
                trends=trends,
                sentiment=sentiment,
                context=InsightContext(
                    employee_id=str(employee_id),
                    period_start=period_start,
                    period_end=period_end,
                ),
            )

            now = self._clock.now()
            models = []
            for insight in insights:
                model = PerformanceInsightModel.from_insight(
                    insight,
                    employee_id=employee_id,
                    period_start=period_start,
                    period_end=period_end,
                    created_by_id=actor_id,
                )
                model.created_at = now
                models.append(model)
            self._session.add_all(models)
            if self._auto_commit:
                self._session.commit()
            else:
                self._session.flush()

        except Exception:
            if self._auto_commit:
                self._session.rollback()
            raise

        logger.info("insight_generation_completed", extra={
            "employee_id": str(employee_id),
            "insight_count": len(models),
            "metrics_scanned": len(metrics),
            "feedback_scanned": len(feedback),
            "attendance_scanned": len(attendance),
        })
        return InsightRun(
            employee_id=employee_id,
            period_start=period_start,
            period_end=period_end,
            trends=trends,
            sentiment=sentiment,
            insights=tuple(m.to_dto() for m in models),
            metrics_scanned=len(metrics),
            feedback_scanned=len(feedback),
            attendance_scanned=len(attendance),
        )

    def list_insights(self, employee_id: UUID) -> list[PerformanceInsightRecord]:
        """Stored insights for an employee, newest period first."""
        stmt = (
            select(PerformanceInsightModel)
            .where(PerformanceInsightModel.employee_id == employee_id)
            .order_by(
                PerformanceInsightModel.period_end.desc(),
                PerformanceInsightModel.created_at,
            )
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]
