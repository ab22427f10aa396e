"""
Tests for HR policy configuration loading.

Covers:
- The shipped default set parses to the documented defaults
- Scope matching (organization, effective dates, version tie-break)
- Rejection of unknown keys
- HR_CONFIG_TRACE emission
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from hr_config import (
    AnomalyPolicy,
    AttendancePolicy,
    InsightPolicy,
    PayrollPolicy,
    SentimentPolicy,
    TrendPolicy,
    get_active_config,
)
from hr_config.loader import compute_checksum, parse_config
from hr_kernel.exceptions import ConfigNotFoundError


def _write_set(base: Path, name: str, body: str) -> None:
    subdir = base / name
    subdir.mkdir()
    (subdir / "root.yaml").write_text(body)


ACME_SET = """
config_id: acme
version: 2
scope:
  organization: acme
  effective_from: "2024-01-01"
payroll:
  tax_rate: "0.15"
anomaly:
  z_threshold: 2.0
"""

WILDCARD_SET = """
config_id: wildcard
version: 9
scope:
  organization: "*"
  effective_from: "2024-01-01"
"""


class TestDefaultSet:

    def test_default_set_matches_documented_defaults(self):
        config = get_active_config("any-org", date(2024, 7, 15))

        assert config.config_id == "hr-default"
        assert config.scope.organization == "*"
        assert config.scope.currency == "INR"
        assert config.payroll == PayrollPolicy()
        assert config.anomaly == AnomalyPolicy()
        assert config.trend == TrendPolicy()
        assert config.sentiment == SentimentPolicy()
        assert config.insight == InsightPolicy()
        assert config.attendance == AttendancePolicy()

    def test_before_effective_date(self):
        with pytest.raises(ConfigNotFoundError) as exc_info:
            get_active_config("any-org", date(2019, 12, 31))

        assert exc_info.value.code == "CONFIG_NOT_FOUND"
        assert exc_info.value.organization == "any-org"

    def test_checksum_is_stable(self):
        first = get_active_config("any-org", date(2024, 7, 15))
        second = get_active_config("other-org", date(2025, 1, 1))

        assert first.checksum == second.checksum
        assert len(first.checksum) == 64

    def test_emits_config_trace(self, captured_logs):
        config = get_active_config("acme", date(2024, 7, 15))

        trace = next(r for r in captured_logs() if r["message"] == "HR_CONFIG_TRACE")
        assert trace["config_set_id"] == "hr-default"
        assert trace["checksum"] == config.checksum
        assert trace["requested_organization"] == "acme"
        assert trace["as_of_date"] == "2024-07-15"


class TestScopeMatching:

    def test_exact_organization_beats_wildcard(self, tmp_path):
        _write_set(tmp_path, "acme", ACME_SET)
        _write_set(tmp_path, "wildcard", WILDCARD_SET)

        config = get_active_config("acme", date(2024, 7, 15), config_dir=tmp_path)

        assert config.config_id == "acme"
        assert config.payroll.tax_rate == Decimal("0.15")
        assert config.payroll.provident_fund_rate == Decimal("0.12")
        assert config.anomaly.z_threshold == 2.0
        assert config.anomaly.min_samples == 3

    def test_other_organizations_get_wildcard(self, tmp_path):
        _write_set(tmp_path, "acme", ACME_SET)
        _write_set(tmp_path, "wildcard", WILDCARD_SET)

        config = get_active_config("globex", date(2024, 7, 15), config_dir=tmp_path)

        assert config.config_id == "wildcard"

    def test_highest_version_wins(self, tmp_path):
        _write_set(tmp_path, "v9", WILDCARD_SET)
        _write_set(tmp_path, "v10", WILDCARD_SET.replace("version: 9", "version: 10")
                   .replace("config_id: wildcard", "config_id: wildcard-10"))

        config = get_active_config("globex", date(2024, 7, 15), config_dir=tmp_path)

        assert config.config_id == "wildcard-10"

    def test_expired_set_ignored(self, tmp_path):
        _write_set(tmp_path, "old", WILDCARD_SET.replace(
            'effective_from: "2024-01-01"',
            'effective_from: "2020-01-01"\n  effective_to: "2023-12-31"',
        ))

        with pytest.raises(ConfigNotFoundError):
            get_active_config("globex", date(2024, 7, 15), config_dir=tmp_path)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            get_active_config("acme", date(2024, 7, 15), config_dir=tmp_path / "missing")


class TestParseConfig:

    def _base(self, **sections):
        data = {
            "config_id": "test",
            "scope": {"organization": "*", "effective_from": "2024-01-01"},
        }
        data.update(sections)
        return data

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown keys in 'payroll'"):
            parse_config(self._base(payroll={"tax_rte": "0.2"}))

    def test_working_days_belong_to_anomaly_section(self):
        config = parse_config(self._base(anomaly={"standard_working_days": 24}))

        assert config.anomaly.standard_working_days == 24
        with pytest.raises(ValueError, match="Unknown keys in 'attendance'"):
            parse_config(self._base(attendance={"standard_working_days": 24}))

    def test_missing_scope_rejected(self):
        with pytest.raises(KeyError):
            parse_config({"config_id": "test"})

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            parse_config(self._base(payroll={"tax_rate": "-0.1"}))

    def test_unknown_verification_method_rejected(self):
        with pytest.raises(ValueError, match="verification_method"):
            parse_config(self._base(attendance={"verification_method": "retina"}))

    def test_themes_keep_yaml_order(self):
        config = parse_config(self._base(sentiment={
            "themes": {"Zeta": ["z"], "Alpha": ["a"]},
        }))

        assert config.sentiment.themes == (("Zeta", ("z",)), ("Alpha", ("a",)))
        assert config.sentiment.positive_keywords == SentimentPolicy().positive_keywords

    def test_empty_sections_use_defaults(self):
        config = parse_config(self._base())

        assert config.payroll == PayrollPolicy()
        assert config.version == 1

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
