"""
hr_config -- single public entrypoint for HR policy configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Engines and services receive the returned
    policy dataclasses through their constructors; none of them read
    configuration files or environment variables directly.

Architecture position:
    Configuration -- YAML-driven policy sets.  This package sits above
    ``hr_kernel`` and below ``hr_engines`` / ``hr_modules``.  The kernel
    MUST NEVER import from ``hr_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Deterministic: the same YAML always produces the same checksum.

Failure modes:
    - ``ConfigNotFoundError`` -- no configuration set matches the requested
      organization / date.
    - ``ValueError`` -- a set carries unknown keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``HR_CONFIG_TRACE`` log entry with the config_id, version, checksum and
    scope, tying every payroll run to the configuration that governed it.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from hr_config.loader import load_yaml_file, parse_config
from hr_config.schema import (
    AnomalyPolicy,
    AttendancePolicy,
    ConfigScope,
    HRPolicyConfig,
    InsightPolicy,
    PayrollPolicy,
    SeedingPolicy,
    SentimentPolicy,
    TrendPolicy,
)
from hr_kernel.exceptions import ConfigNotFoundError
from hr_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

__all__ = [
    "get_active_config",
    "HRPolicyConfig",
    "ConfigScope",
    "PayrollPolicy",
    "AnomalyPolicy",
    "TrendPolicy",
    "SentimentPolicy",
    "InsightPolicy",
    "AttendancePolicy",
    "SeedingPolicy",
]


def get_active_config(
    organization: str,
    as_of_date: date,
    config_dir: Path | None = None,
) -> HRPolicyConfig:
    """The ONLY public configuration entrypoint.

    Scans ``<config_dir>/*/root.yaml``, keeps the sets whose scope matches
    *organization* (or ``"*"``) and whose effective range covers
    *as_of_date*.  An exact organization match beats a wildcard; ties are
    broken by the highest version.

    Args:
        organization: Organization identifier for scope matching.
        as_of_date: Date for effective date filtering.
        config_dir: Override path to configuration sets directory.
            Defaults to hr_config/sets/.

    Returns:
        HRPolicyConfig -- frozen, checksummed policy bundle.

    Raises:
        ConfigNotFoundError: If no matching configuration set is found.
        ValueError: If the matching set is invalid.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR

    config = _find_matching_config(sets_dir, organization, as_of_date)

    _logger.info(
        "HR_CONFIG_TRACE",
        extra={
            "trace_type": "HR_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "scope_organization": config.scope.organization,
            "requested_organization": organization,
            "as_of_date": as_of_date.isoformat(),
        },
    )

    return config


def _find_matching_config(
    sets_dir: Path, organization: str, as_of_date: date
) -> HRPolicyConfig:
    """Find the configuration set for an organization and date.

    Raises:
        ConfigNotFoundError: If ``sets_dir`` does not exist or no
            configuration set matches.
    """
    if not sets_dir.is_dir():
        raise ConfigNotFoundError(organization, as_of_date, str(sets_dir))

    candidates: list[HRPolicyConfig] = []
    for subdir in sorted(sets_dir.iterdir()):
        root_file = subdir / "root.yaml"
        if not subdir.is_dir() or not root_file.exists():
            continue

        config = parse_config(load_yaml_file(root_file))
        scope = config.scope

        scope_matches = scope.organization in (organization, "*")
        date_matches = scope.effective_from <= as_of_date and (
            scope.effective_to is None or scope.effective_to >= as_of_date
        )
        if scope_matches and date_matches:
            candidates.append(config)

    if not candidates:
        raise ConfigNotFoundError(organization, as_of_date, str(sets_dir))

    return max(
        candidates,
        key=lambda c: (c.scope.organization == organization, c.version),
    )
