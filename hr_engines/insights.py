"""
hr_engines.insights -- Turn trend and sentiment analyses into insight records.

Responsibility:
    Apply the insight rules (attendance, per-metric, consistency, feedback)
    and produce titled, summarized ``Insight`` records with a confidence
    score and JSON-ready supporting data.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by ``hr_modules.performance.service``, which persists the
    records append-only.

Invariants enforced:
    - Every insight's supporting data carries ``analysisContext`` with the
      analysed period and employee.
    - At most one attendance insight, at most one insight per metric, at
      most one consistency insight.
    - Neutral feedback produces no feedback insights.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from hr_config.schema import InsightPolicy
from hr_engines.sentiment import Sentiment, SentimentAnalysis
from hr_engines.tracer import traced_engine
from hr_engines.trend import ConsistencyResult, Trend, TrendAnalysis, TrendResult
from hr_kernel.domain.rounding import format_number
from hr_kernel.logging_config import get_logger

logger = get_logger("engines.insights")


class InsightType(str, Enum):
    TREND_ANALYSIS = "trend_analysis"
    IMPROVEMENT_SUGGESTION = "improvement_suggestion"
    STRENGTH_HIGHLIGHT = "strength_highlight"


@dataclass(frozen=True)
class Insight:
    insight_type: InsightType
    title: str
    summary: str
    supporting_data: dict[str, Any]
    confidence_score: float


@dataclass(frozen=True)
class InsightContext:
    """Who and which period an analysis covered."""

    employee_id: str
    period_start: date
    period_end: date

    def to_dict(self) -> dict[str, str]:
        return {
            "periodStart": self.period_start.isoformat(),
            "periodEnd": self.period_end.isoformat(),
            "employeeId": self.employee_id,
        }


def format_metric_name(metric_type: str) -> str:
    """``client_satisfaction`` -> ``Client Satisfaction``."""
    return " ".join(word[:1].upper() + word[1:] for word in metric_type.split("_"))


class InsightGenerator:
    """Rule-based insight generation."""

    def __init__(self, policy: InsightPolicy | None = None):
        self._policy = policy or InsightPolicy()

    @property
    def policy(self) -> InsightPolicy:
        return self._policy

    def attendance_insights(self, data: TrendResult) -> list[Insight]:
        threshold = self._policy.attendance_change_threshold
        supporting = data.to_dict()
        if data.trend == Trend.IMPROVING and data.change > threshold:
            return [Insight(
                insight_type=InsightType.TREND_ANALYSIS,
                title="Improving Attendance Trend",
                summary=(
                    f"Attendance has improved by {format_number(data.change)}% over the "
                    "past period, showing excellent commitment and reliability."
                ),
                supporting_data={"attendanceData": supporting, "improvementType": "attendance"},
                confidence_score=0.85,
            )]
        if data.trend == Trend.DECLINING and data.change < -threshold:
            return [Insight(
                insight_type=InsightType.IMPROVEMENT_SUGGESTION,
                title="Attendance Requires Attention",
                summary=(
                    f"Attendance has declined by {format_number(abs(data.change))}% recently. "
                    "Consider discussing any challenges and establishing support mechanisms."
                ),
                supporting_data={"attendanceData": supporting, "concernType": "attendance"},
                confidence_score=0.80,
            )]
        if data.current >= self._policy.excellent_attendance_rate:
            return [Insight(
                insight_type=InsightType.STRENGTH_HIGHLIGHT,
                title="Excellent Attendance Record",
                summary=(
                    f"Maintains exceptional attendance rate of {format_number(data.current)}%, "
                    "demonstrating strong commitment and reliability."
                ),
                supporting_data={"attendanceData": supporting, "strengthType": "consistency"},
                confidence_score=0.90,
            )]
        return []

    def metric_insights(self, metric_type: str, data: TrendResult) -> list[Insight]:
        threshold = self._policy.metric_change_threshold
        name = format_metric_name(metric_type)
        previous = format_number(data.previous)
        current = format_number(data.current)
        if data.trend == Trend.IMPROVING and data.change > threshold:
            return [Insight(
                insight_type=InsightType.TREND_ANALYSIS,
                title=f"Strong Improvement in {name}",
                summary=(
                    f"{name} has improved by {format_number(data.change)}% from {previous} "
                    f"to {current}, indicating positive development and growth."
                ),
                supporting_data={
                    "metricType": metric_type,
                    "data": data.to_dict(),
                    "improvementType": "performance",
                },
                confidence_score=0.80,
            )]
        if data.trend == Trend.DECLINING and data.change < -threshold:
            return [Insight(
                insight_type=InsightType.IMPROVEMENT_SUGGESTION,
                title=f"{name} Needs Focus",
                summary=(
                    f"{name} has decreased by {format_number(abs(data.change))}% from "
                    f"{previous} to {current}. Consider targeted development or support."
                ),
                supporting_data={
                    "metricType": metric_type,
                    "data": data.to_dict(),
                    "concernType": "performance",
                },
                confidence_score=0.75,
            )]
        return []

    def consistency_insights(self, data: ConsistencyResult) -> list[Insight]:
        if data.score >= self._policy.high_consistency_score:
            return [Insight(
                insight_type=InsightType.STRENGTH_HIGHLIGHT,
                title="Highly Consistent Performance",
                summary=(
                    f"Demonstrates excellent consistency with a score of {data.score}%. "
                    f"{data.description}"
                ),
                supporting_data={"consistencyData": data.to_dict(), "strengthType": "consistency"},
                confidence_score=0.85,
            )]
        if data.score < self._policy.low_consistency_score:
            return [Insight(
                insight_type=InsightType.IMPROVEMENT_SUGGESTION,
                title="Consistency Development Opportunity",
                summary=(
                    f"Consistency score of {data.score}% suggests room for improvement. "
                    f"{data.description}"
                ),
                supporting_data={"consistencyData": data.to_dict(), "concernType": "consistency"},
                confidence_score=0.70,
            )]
        return []

    def sentiment_insights(self, data: SentimentAnalysis) -> list[Insight]:
        insights: list[Insight] = []
        if (
            data.overall_sentiment == Sentiment.POSITIVE
            and data.average_rating > self._policy.high_rating
        ):
            insights.append(Insight(
                insight_type=InsightType.STRENGTH_HIGHLIGHT,
                title="Positive Feedback and High Ratings",
                summary=(
                    "Receives consistently positive feedback with an average rating of "
                    f"{format_number(data.average_rating)}/5. Strengths include: "
                    f"{', '.join(data.strengths[:3])}."
                ),
                supporting_data={"sentimentData": data.to_dict(), "strengthType": "feedback"},
                confidence_score=0.85,
            ))
        elif data.overall_sentiment == Sentiment.NEGATIVE:
            insights.append(Insight(
                insight_type=InsightType.IMPROVEMENT_SUGGESTION,
                title="Feedback Indicates Development Areas",
                summary=(
                    "Recent feedback suggests areas for growth. Focus areas: "
                    f"{', '.join(data.improvements[:3])}."
                ),
                supporting_data={"sentimentData": data.to_dict(), "concernType": "feedback"},
                confidence_score=0.75,
            ))

        if data.key_themes:
            insights.append(Insight(
                insight_type=InsightType.TREND_ANALYSIS,
                title="Key Performance Themes",
                summary=(
                    f"Feedback analysis reveals focus on: {', '.join(data.key_themes)}. "
                    "These themes provide insight into current role focus and development areas."
                ),
                supporting_data={"themes": list(data.key_themes), "analysisType": "themes"},
                confidence_score=0.70,
            ))
        return insights

    @traced_engine("insights", "1.0", fingerprint_fields=("trends", "sentiment", "context"))
    def generate(
        self,
        *,
        trends: TrendAnalysis,
        sentiment: SentimentAnalysis,
        context: InsightContext,
    ) -> list[Insight]:
        insights = self.attendance_insights(trends.attendance_rate)
        for metric_type, data in trends.performance_metrics.items():
            insights.extend(self.metric_insights(metric_type, data))
        insights.extend(self.consistency_insights(trends.consistency))
        if sentiment.overall_sentiment != Sentiment.NEUTRAL:
            insights.extend(self.sentiment_insights(sentiment))

        analysis_context = context.to_dict()
        return [
            Insight(
                insight_type=i.insight_type,
                title=i.title,
                summary=i.summary,
                supporting_data={**i.supporting_data, "analysisContext": analysis_context},
                confidence_score=i.confidence_score,
            )
            for i in insights
        ]
