"""
Property-based tests for the payroll and anomaly engines.

Verifies over generated inputs:
- net pay is always earnings minus deductions
- totals are the sums of their itemized components
- full attendance without adjustments earns exactly the CTC
- LOP never exceeds the monthly basic
- flagged anomalies always exceed the threshold
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from hr_engines.anomaly import AnomalyDetector, SourceRecord
from hr_engines.payroll import (
    AttendancePeriod,
    PayrollAdjustments,
    PayrollCalculator,
    SalaryStructure,
)

amounts = st.integers(min_value=0, max_value=500_000).map(Decimal)
store_amounts = st.decimals(
    min_value=0, max_value=500_000, places=9, allow_nan=False, allow_infinity=False
)


@st.composite
def structures(draw, values=amounts):
    return SalaryStructure(
        basic_salary=draw(values),
        hra=draw(values),
        special_allowance=draw(values),
        transport_allowance=draw(values),
        medical_allowance=draw(values),
        other_allowances=draw(values),
    )


@st.composite
def attendance_periods(draw):
    working_days = draw(st.integers(min_value=1, max_value=31))
    present_days = draw(st.integers(min_value=0, max_value=working_days))
    lop_days = draw(st.integers(min_value=0, max_value=working_days - present_days))
    return AttendancePeriod(
        working_days=working_days, present_days=present_days, lop_days=lop_days
    )


adjustments = st.builds(
    PayrollAdjustments,
    bonus=st.integers(min_value=0, max_value=100_000).map(Decimal),
    manual_deductions=st.integers(min_value=0, max_value=100_000).map(Decimal),
)

calculator = PayrollCalculator()


class TestPayrollIdentities:

    @given(structure=structures(), attendance=attendance_periods(), extra=adjustments)
    @settings(max_examples=200, deadline=None)
    def test_net_is_earnings_minus_deductions(self, structure, attendance, extra):
        result = calculator.calculate(
            structure=structure, attendance=attendance, adjustments=extra
        )

        assert result.net_pay == result.total_earnings - result.total_deductions

    @given(structure=structures(), attendance=attendance_periods(), extra=adjustments)
    @settings(max_examples=200, deadline=None)
    def test_totals_are_component_sums(self, structure, attendance, extra):
        result = calculator.calculate(
            structure=structure, attendance=attendance, adjustments=extra
        )

        assert result.total_earnings == (
            result.basic_salary
            + result.hra
            + result.special_allowance
            + result.transport_allowance
            + result.medical_allowance
            + result.other_allowances
            + result.bonus
        )
        assert result.total_deductions == (
            result.provident_fund
            + result.tax
            + result.employee_state_insurance
            + result.lop_deduction
            + result.manual_deductions
        )

    @given(structure=structures(), days=st.integers(min_value=16, max_value=31))
    @settings(max_examples=100, deadline=None)
    def test_full_attendance_earns_ctc(self, structure, days):
        result = calculator.calculate(
            structure=structure,
            attendance=AttendancePeriod(working_days=days, present_days=days),
        )

        assert result.total_earnings == structure.ctc
        assert result.lop_deduction == Decimal("0")

    @given(structure=structures(), attendance=attendance_periods())
    @settings(max_examples=100, deadline=None)
    def test_lop_bounded_by_basic(self, structure, attendance):
        result = calculator.calculate(structure=structure, attendance=attendance)

        assert Decimal("0") <= result.lop_deduction <= structure.basic_salary

    @given(
        structure=st.one_of(structures(), structures(values=store_amounts)),
        attendance=attendance_periods(),
        bonus=store_amounts,
    )
    @settings(max_examples=100, deadline=None)
    def test_amounts_are_whole_units(self, structure, attendance, bonus):
        result = calculator.calculate(
            structure=structure,
            attendance=attendance,
            adjustments=PayrollAdjustments(bonus=bonus),
        )

        for value in result.to_row().values():
            if isinstance(value, Decimal):
                assert value == value.to_integral_value()


class TestAnomalyProperties:

    @given(
        values=st.lists(
            st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
            min_size=3,
            max_size=60,
        )
    )
    @settings(max_examples=200, deadline=None)
    def test_flagged_values_exceed_threshold(self, values):
        assume(len(set(values)) > 1)
        detector = AnomalyDetector()
        records = [
            SourceRecord("emp-1", date(2024, 1, 1) + timedelta(days=i))
            for i in range(len(values))
        ]

        anomalies = detector.detect(values=values, records=records, metric_type="net_pay")

        for anomaly in anomalies:
            assert anomaly.z_score > detector.policy.z_threshold
            assert anomaly.value in values
