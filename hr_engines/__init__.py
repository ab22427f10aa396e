"""
hr_engines -- Pure calculation engines for payroll, anomalies and performance.

Every engine is deterministic, performs no I/O and never reads the clock.
Policies from ``hr_config.schema`` are injected through the constructor;
the defaults equal the documented business rules.

Engines:
    PayrollCalculator           salary structure + attendance -> itemized pay
    AnomalyDetector             z-score outliers, payroll/attendance scans
    TrendAnalyzer               improving / declining / stable, consistency
    FeedbackSentimentAnalyzer   keyword sentiment, themes, phrases
    InsightGenerator            analyses -> insight records
"""

from hr_engines.anomaly import (
    Anomaly,
    AnomalyDetector,
    AnomalyType,
    Severity,
    SourceRecord,
)
from hr_engines.insights import Insight, InsightContext, InsightGenerator, InsightType
from hr_engines.payroll import (
    AttendancePeriod,
    PayrollAdjustments,
    PayrollCalculator,
    PayrollResult,
    SalaryStructure,
)
from hr_engines.records import (
    AttendanceRecord,
    AttendanceStatus,
    FeedbackRecord,
    MetricSample,
    PayrollHistoryEntry,
)
from hr_engines.sentiment import FeedbackSentimentAnalyzer, Sentiment, SentimentAnalysis
from hr_engines.tracer import traced_engine
from hr_engines.trend import (
    ConsistencyResult,
    Trend,
    TrendAnalysis,
    TrendAnalyzer,
    TrendResult,
    percent_change,
)

__all__ = [
    # Payroll
    "PayrollCalculator",
    "SalaryStructure",
    "AttendancePeriod",
    "PayrollAdjustments",
    "PayrollResult",
    # Anomaly
    "AnomalyDetector",
    "Anomaly",
    "AnomalyType",
    "Severity",
    "SourceRecord",
    # Trend
    "TrendAnalyzer",
    "TrendAnalysis",
    "TrendResult",
    "ConsistencyResult",
    "Trend",
    "percent_change",
    # Sentiment
    "FeedbackSentimentAnalyzer",
    "SentimentAnalysis",
    "Sentiment",
    # Insights
    "InsightGenerator",
    "Insight",
    "InsightContext",
    "InsightType",
    # Records
    "MetricSample",
    "AttendanceRecord",
    "AttendanceStatus",
    "FeedbackRecord",
    "PayrollHistoryEntry",
    # Tracing
    "traced_engine",
]
