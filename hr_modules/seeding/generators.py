"""
Demo fixture generation (``hr_modules.seeding.generators``).

Responsibility:
    Produce realistic synthetic HR data: salary structures, monthly
    attendance samples and adjustments for payroll, daily attendance
    records, monthly performance metrics, quarterly self-review feedback
    and demo employee profiles.

Architecture position:
    Modules layer, pure: no session, no clock.  Randomness comes only from
    the injected ``random.Random``, so the same seed yields the same
    fixtures.

Invariants enforced:
    - Generated attendance samples always satisfy
      present_days + lop_days == working_days.
    - Daily attendance covers weekdays only.
    - ``biometric_verified`` is only ever True when the configured
      verification method is ``biometric``.
"""

from __future__ import annotations

import calendar
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from hr_engines.payroll import AttendancePeriod, PayrollAdjustments, SalaryStructure
from hr_engines.records import AttendanceStatus
from hr_kernel.domain.calendar import add_months
from hr_kernel.domain.rounding import round_half_up, round_money

# (min, max, weight); weights sum to 1.
SALARY_BANDS: tuple[tuple[int, int, float], ...] = (
    (25000, 35000, 0.3),
    (35000, 50000, 0.4),
    (50000, 65000, 0.2),
    (65000, 80000, 0.1),
)
FALLBACK_BASE_SALARY = 40000

# (metric_type, min, max, target)
METRIC_TYPES: tuple[tuple[str, float, float, float], ...] = (
    ("tasks_completed", 15, 45, 30),
    ("attendance_rate", 85, 100, 95),
    ("training_progress", 60, 100, 80),
    ("goal_achievement", 70, 100, 90),
    ("client_satisfaction", 3.5, 5.0, 4.5),
    ("code_quality", 70, 95, 85),
    ("project_delivery", 80, 100, 95),
)

METRIC_NOTES: dict[str, tuple[str, ...]] = {
    "tasks_completed": (
        "Exceeded monthly targets",
        "Completed critical project deliverables",
        "Improved task completion efficiency",
    ),
    "attendance_rate": (
        "Perfect attendance this period",
        "Minor sick leave taken",
        "Consistent presence in office",
    ),
    "training_progress": (
        "Completed certification course",
        "Attended workshop sessions",
        "Technical training completed",
    ),
    "goal_achievement": (
        "Met all quarterly objectives",
        "Delivered project on time",
        "Process optimization completed",
    ),
    "client_satisfaction": (
        "Positive client feedback received",
        "Resolved client issues effectively",
        "Proactive communication",
    ),
    "code_quality": (
        "Clean code practices followed",
        "Reduced bug count significantly",
        "Code refactoring completed",
    ),
    "project_delivery": (
        "On-time project completion",
        "Within budget delivery",
        "Stakeholder expectations met",
    ),
}

ACHIEVEMENTS = (
    "completed all assigned projects",
    "exceeded performance targets",
    "demonstrated strong collaboration",
    "showed continuous learning",
    "improved technical skills",
    "contributed to team success",
    "maintained quality standards",
    "delivered on time consistently",
)

FOCUS_AREAS = (
    "project management",
    "client communication",
    "technical implementation",
    "team collaboration",
    "process improvement",
    "quality assurance",
    "deadline management",
    "stakeholder engagement",
)

GOALS = (
    "enhance technical expertise",
    "improve communication skills",
    "take on leadership roles",
    "optimize work processes",
    "increase productivity",
    "build stronger relationships",
    "expand knowledge base",
    "contribute to innovation",
)

SELF_REVIEW_TEMPLATES = (
    "During the review period ending {month} {year}, I believe my performance has been "
    "{level}. I have {achievement} and focused particularly on {area}. Moving forward, "
    "I plan to {goal} to further enhance my contributions to the team.",
    "This quarter, I maintained {level} standards in my work. I successfully {achievement} "
    "while demonstrating growth in {area}. My goals for the next period include efforts to "
    "{goal} and continue delivering quality results.",
    "My self-assessment for {month} {year} shows {level} progress across key performance "
    "areas. I have consistently {achievement} and made significant improvements in {area}. "
    "Looking ahead, I am committed to {goal} and maintaining high performance standards.",
    "Reflecting on my performance this quarter, I believe I have achieved {level} results. "
    "I particularly excelled in {area} and {achievement}. For continued growth, I will "
    "focus on efforts to {goal} and build upon my current strengths.",
)


@dataclass(frozen=True)
class DemoEmployee:
    employee_code: str
    first_name: str
    last_name: str
    email: str
    department: str
    designation: str
    hire_date: date


DEMO_EMPLOYEES: tuple[DemoEmployee, ...] = (
    DemoEmployee("EMP001", "Rohan", "Mehta", "rohan.mehta@company.in",
                 "Engineering", "Engineering Manager", date(2022, 8, 10)),
    DemoEmployee("EMP002", "Sneha", "Kapoor", "sneha.kapoor@company.in",
                 "Sales", "Sales Manager", date(2022, 11, 20)),
    DemoEmployee("EMP003", "Amit", "Gupta", "amit.gupta@company.in",
                 "Marketing", "Marketing Manager", date(2023, 3, 5)),
    DemoEmployee("EMP004", "Kunal", "Desai", "kunal.desai@company.in",
                 "Engineering", "Frontend Developer", date(2023, 7, 12)),
    DemoEmployee("EMP005", "Neha", "Bhat", "neha.bhat@company.in",
                 "Engineering", "Backend Developer", date(2023, 5, 22)),
    DemoEmployee("EMP006", "Ayesha", "Khan", "ayesha.khan@company.in",
                 "Engineering", "DevOps Engineer", date(2023, 9, 15)),
    DemoEmployee("EMP007", "Priya", "Nair", "priya.nair@company.in",
                 "Sales", "Sales Executive", date(2023, 6, 18)),
    DemoEmployee("EMP008", "Megha", "Sinha", "megha.sinha@company.in",
                 "Sales", "Account Executive", date(2023, 10, 5)),
    DemoEmployee("EMP009", "Pooja", "Agarwal", "pooja.agarwal@company.in",
                 "Marketing", "Digital Marketing Specialist", date(2023, 9, 8)),
    DemoEmployee("EMP010", "Karan", "Sharma", "karan.sharma@company.in",
                 "Marketing", "Content Writer", date(2024, 4, 3)),
)


@dataclass(frozen=True)
class DailyAttendance:
    record_date: date
    status: AttendanceStatus
    check_in_time: datetime | None
    check_out_time: datetime | None
    working_hours: float
    biometric_verified: bool


@dataclass(frozen=True)
class GeneratedMetric:
    metric_type: str
    metric_value: float
    target_value: float
    measurement_date: date
    quarter: int
    year: int
    notes: str | None = None


@dataclass(frozen=True)
class GeneratedFeedback:
    feedback_type: str
    feedback_text: str
    rating: float
    review_period_start: date
    review_period_end: date


def performance_level(rating: float) -> str:
    if rating >= 4.5:
        return "excellent"
    if rating >= 4.0:
        return "strong"
    if rating >= 3.5:
        return "good"
    if rating >= 3.0:
        return "satisfactory"
    return "needs improvement"


class FixtureGenerator:
    """
    Seeded generator for demo HR data.

    Guarantees:
        - Two generators built with ``random.Random(seed)`` for the same
          seed produce identical sequences of fixtures.
    """

    def __init__(self, rng: random.Random | None = None, verification_method: str = "geolocation"):
        self._rng = rng or random.Random()
        self._verification_method = verification_method

    @property
    def verification_method(self) -> str:
        return self._verification_method

    # -- payroll --------------------------------------------------------------

    def base_salary(self) -> int:
        """Weighted pick of a salary band, then a uniform amount inside it."""
        roll = self._rng.random()
        cumulative = 0.0
        for low, high, weight in SALARY_BANDS:
            cumulative += weight
            if roll <= cumulative:
                return self._rng.randint(low, high)
        return FALLBACK_BASE_SALARY

    def salary_structure(self, base_salary: int | None = None) -> SalaryStructure:
        basic = Decimal(base_salary if base_salary is not None else self.base_salary())
        return SalaryStructure(
            basic_salary=basic,
            hra=round_money(basic * Decimal("0.4")),
            special_allowance=round_money(basic * Decimal("0.3")),
            transport_allowance=Decimal(3000),
            medical_allowance=Decimal(2000),
            other_allowances=Decimal(1000),
        )

    def attendance_sample(self) -> AttendancePeriod:
        """22-27 working days with 0-2 of them lost."""
        working_days = self._rng.randint(22, 27)
        present_days = working_days - self._rng.randint(0, 2)
        return AttendancePeriod(
            working_days=working_days,
            present_days=present_days,
            lop_days=working_days - present_days,
        )

    def bonus(self) -> Decimal:
        if self._rng.random() > 0.7:
            return Decimal(self._rng.randint(0, 4999))
        return Decimal(0)

    def other_deductions(self) -> Decimal:
        if self._rng.random() > 0.8:
            return Decimal(self._rng.randint(0, 999))
        return Decimal(0)

    def adjustments(self) -> PayrollAdjustments:
        return PayrollAdjustments(bonus=self.bonus(), manual_deductions=self.other_deductions())

    # -- attendance -----------------------------------------------------------

    def _shift(self, day: date, hour_low: int, minute_low: int, minute_span: int,
               hours_low: float, hours_span: float) -> tuple[datetime, datetime, float]:
        hour = hour_low + int(self._rng.random() * 2)
        minute = minute_low + self._rng.randrange(minute_span)
        hours = hours_low + self._rng.random() * hours_span
        check_in = datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
        check_out = check_in + timedelta(hours=int(hours), minutes=int((hours % 1) * 60))
        return check_in, check_out, round_half_up(hours, 2)

    def _verified(self) -> bool:
        verified = self._rng.random() > 0.1
        return verified and self._verification_method == "biometric"

    def daily_attendance(self, start: date, end: date) -> list[DailyAttendance]:
        """One record per weekday in ``[start, end]``.

        Each day is present with an 85-100% chance; otherwise it is late or
        absent with equal odds.
        """
        records: list[DailyAttendance] = []
        day = start
        while day <= end:
            if day.weekday() < 5:
                rate = 0.85 + self._rng.random() * 0.15
                if self._rng.random() < rate:
                    check_in, check_out, hours = self._shift(day, 8, 0, 60, 7.5, 2)
                    records.append(DailyAttendance(
                        day, AttendanceStatus.PRESENT, check_in, check_out, hours,
                        self._verified(),
                    ))
                elif self._rng.random() < 0.5:
                    check_in, check_out, hours = self._shift(day, 10, 30, 30, 6, 1.5)
                    records.append(DailyAttendance(
                        day, AttendanceStatus.LATE, check_in, check_out, hours,
                        self._verified(),
                    ))
                else:
                    records.append(DailyAttendance(
                        day, AttendanceStatus.ABSENT, None, None, 0.0, False,
                    ))
            day += timedelta(days=1)
        return records

    # -- performance ----------------------------------------------------------

    def performance_metrics(self, start: date, end: date) -> list[GeneratedMetric]:
        """3-5 distinct metrics per month, measured mid-month.

        Values drift upward by 2% per month since ``start`` with +/-15%
        noise, clamped to each metric's range.
        """
        metrics: list[GeneratedMetric] = []
        current = start
        while current <= end:
            months_from_start = (current - start).days // 30
            improvement = 1 + months_from_start * 0.02
            measured = current.replace(day=15)
            for metric_type, low, high, target in self._rng.sample(
                METRIC_TYPES, self._rng.randint(3, 5)
            ):
                variance = (self._rng.random() - 0.5) * 0.3
                base = low + (high - low) * (0.6 + self._rng.random() * 0.4)
                value = max(low, min(high, base * improvement + base * variance))
                notes = None
                if self._rng.random() > 0.6:
                    notes = self._rng.choice(METRIC_NOTES[metric_type])
                metrics.append(GeneratedMetric(
                    metric_type=metric_type,
                    metric_value=round_half_up(value, 2),
                    target_value=float(target),
                    measurement_date=measured,
                    quarter=(measured.month - 1) // 3 + 1,
                    year=measured.year,
                    notes=notes,
                ))
            current = add_months(current, 1)
        return metrics

    def feedback_text(self, rating: float, review_start: date) -> str:
        template = self._rng.choice(SELF_REVIEW_TEMPLATES)
        return template.format(
            month=calendar.month_name[review_start.month],
            year=review_start.year,
            level=performance_level(rating),
            achievement=self._rng.choice(ACHIEVEMENTS),
            area=self._rng.choice(FOCUS_AREAS),
            goal=self._rng.choice(GOALS),
        )

    def quarterly_feedback(self, start: date, end: date) -> list[GeneratedFeedback]:
        """One self-review per quarter from ``start``; ratings creep up 0.1 per quarter."""
        feedback: list[GeneratedFeedback] = []
        current = start
        while current <= end:
            quarter_start = current.replace(day=1)
            quarter_end = min(add_months(quarter_start, 3) - timedelta(days=1), end)
            quarter_number = (current - start).days // 90
            rating = min(5.0, 3.2 + self._rng.random() * 1.5 + quarter_number * 0.1)
            feedback.append(GeneratedFeedback(
                feedback_type="self_review",
                feedback_text=self.feedback_text(rating, quarter_start),
                rating=round_half_up(rating, 1),
                review_period_start=quarter_start,
                review_period_end=quarter_end,
            ))
            current = add_months(current, 3)
        return feedback

    # -- employees ------------------------------------------------------------

    def demo_employees(self, count: int | None = None) -> tuple[DemoEmployee, ...]:
        return DEMO_EMPLOYEES if count is None else DEMO_EMPLOYEES[:count]
