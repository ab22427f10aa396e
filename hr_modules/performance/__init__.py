"""
Performance Module (``hr_modules.performance``).

Stored performance metrics and review feedback, and the insight records
generated from them by ``hr_engines.trend``, ``hr_engines.sentiment`` and
``hr_engines.insights``.
"""

from hr_modules.performance.models import InsightRun, PerformanceInsightRecord
from hr_modules.performance.service import PerformanceInsightService

__all__ = ["InsightRun", "PerformanceInsightRecord", "PerformanceInsightService"]
