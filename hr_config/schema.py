"""
HRPolicyConfig schema.

Defines the human-authored, reviewable configuration artifact for the HR
calculation core.  YAML sets are parsed into these types by the loader and
handed to engines and services.

Every field default equals the documented business default, so engines can
be constructed with ``PayrollPolicy()`` and friends when no configuration
set is loaded (tests, scripts, direct library use).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfigScope:
    """Scope of applicability for a configuration set."""

    organization: str  # "*" matches every organization
    currency: str
    effective_from: date
    effective_to: date | None = None


# ---------------------------------------------------------------------------
# Payroll
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollPolicy:
    """Statutory rates and thresholds for the monthly payroll calculation."""

    provident_fund_rate: Decimal = Decimal("0.12")
    tax_threshold: Decimal = Decimal("50000")
    tax_rate: Decimal = Decimal("0.10")
    esi_threshold: Decimal = Decimal("25000")
    esi_rate: Decimal = Decimal("0.0075")
    transport_full_after_days: int = 15

    def __post_init__(self) -> None:
        for name in (
            "provident_fund_rate",
            "tax_threshold",
            "tax_rate",
            "esi_threshold",
            "esi_rate",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"PayrollPolicy.{name} cannot be negative")
        if self.transport_full_after_days < 0:
            raise ValueError("PayrollPolicy.transport_full_after_days cannot be negative")


# ---------------------------------------------------------------------------
# Anomaly detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnomalyPolicy:
    """Z-score detection parameters.

    ``z_threshold`` decides what is flagged; the two severity cut-offs only
    bucket what was flagged.  With the defaults every flagged item already
    exceeds ``medium_severity_z``, so the ``low`` bucket is never produced.
    """

    z_threshold: float = 2.5
    high_severity_z: float = 3.0
    medium_severity_z: float = 2.5
    min_samples: int = 3
    standard_working_days: int = 22
    late_arrival_threshold_pct: float = 20.0
    late_arrival_high_pct: float = 40.0
    payroll_lookback_months: int = 12
    attendance_lookback_days: int = 90

    def __post_init__(self) -> None:
        if self.min_samples < 1:
            raise ValueError("AnomalyPolicy.min_samples must be at least 1")


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrendPolicy:
    """Stability bands and consistency cut-offs for trend analysis."""

    metric_stable_band: float = 5.0
    attendance_stable_band: float = 2.0
    min_trend_samples: int = 2
    min_consistency_samples: int = 3
    consistency_cv_threshold: float = 0.2
    consistent_attendance_rate: float = 90.0


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------

DEFAULT_POSITIVE_KEYWORDS: tuple[str, ...] = (
    "excellent", "outstanding", "great", "good", "amazing", "fantastic",
    "wonderful", "impressive", "strong", "effective", "skilled", "talented",
    "dedicated", "reliable", "consistent", "proactive", "innovative",
    "collaborative",
)

DEFAULT_NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "poor", "bad", "terrible", "awful", "disappointing", "weak", "ineffective",
    "unreliable", "inconsistent", "lacking", "needs improvement", "struggling",
    "difficult", "challenging", "issues", "problems", "concerns",
)

DEFAULT_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Communication", ("communication", "communicate", "speaking", "listening", "feedback")),
    ("Leadership", ("leadership", "leader", "leading", "management", "team")),
    ("Technical Skills", ("technical", "programming", "coding", "development", "software")),
    ("Problem Solving", ("problem", "solution", "solving", "analytical", "critical thinking")),
    ("Collaboration", ("collaboration", "teamwork", "cooperative", "working together")),
    ("Time Management", ("time", "deadline", "schedule", "punctual", "organized")),
    ("Innovation", ("innovative", "creative", "ideas", "thinking outside", "new approaches")),
)

DEFAULT_STRENGTH_PATTERNS: tuple[str, ...] = (
    r"strong in (.+?)[.,]",
    r"excellent (.+?)[.,]",
    r"good at (.+?)[.,]",
    r"skilled in (.+?)[.,]",
    r"talented (.+?)[.,]",
)

DEFAULT_IMPROVEMENT_PATTERNS: tuple[str, ...] = (
    r"needs to improve (.+?)[.,]",
    r"should work on (.+?)[.,]",
    r"could be better at (.+?)[.,]",
    r"improvement needed in (.+?)[.,]",
    r"focus on (.+?)[.,]",
)


@dataclass(frozen=True)
class SentimentPolicy:
    """Keyword lists, theme map and phrase templates for feedback analysis.

    Theme order is significant: themes are reported in definition order,
    not by mention count.
    """

    positive_keywords: tuple[str, ...] = DEFAULT_POSITIVE_KEYWORDS
    negative_keywords: tuple[str, ...] = DEFAULT_NEGATIVE_KEYWORDS
    themes: tuple[tuple[str, tuple[str, ...]], ...] = DEFAULT_THEMES
    strength_patterns: tuple[str, ...] = DEFAULT_STRENGTH_PATTERNS
    improvement_patterns: tuple[str, ...] = DEFAULT_IMPROVEMENT_PATTERNS
    positive_threshold: float = 5.0
    negative_threshold: float = -5.0
    max_themes: int = 5
    max_phrases: int = 5
    max_phrase_length: int = 50


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InsightPolicy:
    """Thresholds that turn analysis results into insight records."""

    attendance_change_threshold: float = 5.0
    excellent_attendance_rate: float = 95.0
    metric_change_threshold: float = 10.0
    high_consistency_score: int = 80
    low_consistency_score: int = 50
    high_rating: float = 4.0
    default_period_months: int = 6


# ---------------------------------------------------------------------------
# Attendance / seeding
# ---------------------------------------------------------------------------

VERIFICATION_METHODS = ("geolocation", "biometric")


@dataclass(frozen=True)
class AttendancePolicy:
    """How attendance check-ins are verified.

    ``verification_method`` replaces what used to be a per-browser toggle:
    it is passed explicitly to whatever needs it.
    """

    verification_method: str = "geolocation"

    def __post_init__(self) -> None:
        if self.verification_method not in VERIFICATION_METHODS:
            raise ValueError(
                f"Unknown verification_method {self.verification_method!r}; "
                f"expected one of {VERIFICATION_METHODS}"
            )


@dataclass(frozen=True)
class SeedingPolicy:
    """Defaults for demo data generation."""

    rng_seed: int | None = None
    payroll_months: int = 6
    performance_months: int = 6
    attendance_days: int = 90


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HRPolicyConfig:
    """Root configuration artifact.  One per configuration set."""

    config_id: str
    version: int
    scope: ConfigScope
    payroll: PayrollPolicy = field(default_factory=PayrollPolicy)
    anomaly: AnomalyPolicy = field(default_factory=AnomalyPolicy)
    trend: TrendPolicy = field(default_factory=TrendPolicy)
    sentiment: SentimentPolicy = field(default_factory=SentimentPolicy)
    insight: InsightPolicy = field(default_factory=InsightPolicy)
    attendance: AttendancePolicy = field(default_factory=AttendancePolicy)
    seeding: SeedingPolicy = field(default_factory=SeedingPolicy)
    checksum: str = ""
