"""
Configuration Loader (``hr_config.loader``).

Responsibility
--------------
Loads a configuration set's ``root.yaml`` and parses it into the typed
``hr_config.schema`` dataclasses.  The single public entry point for
runtime config is ``hr_config.get_active_config()``; this module is its
build/test tooling.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Keys absent from a policy section fall back to the dataclass default;
  unknown keys are rejected so typos do not silently disable a rule.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys (``config_id``, ``scope``)  -> ``KeyError``.
* Unknown policy keys or bad values  -> ``ValueError``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

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


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """
    Parse a date from YAML (string or date object).

    Raises:
        ValueError: if ``value`` is not a valid date representation.
    """
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_scope(data: dict[str, Any]) -> ConfigScope:
    """Parse a ConfigScope from a dict."""
    return ConfigScope(
        organization=str(data["organization"]),
        currency=data.get("currency", "INR"),
        effective_from=parse_date(data["effective_from"]),
        effective_to=parse_date(data["effective_to"]) if data.get("effective_to") else None,
    )


def _coerce(field_type: Any, value: Any) -> Any:
    # Annotations are strings under ``from __future__ import annotations``.
    type_name = field_type if isinstance(field_type, str) else getattr(field_type, "__name__", "")
    if type_name == "Decimal":
        return Decimal(str(value))
    if type_name == "float":
        return float(value)
    if type_name == "int":
        return int(value)
    if type_name.startswith("tuple[tuple[str"):
        return tuple((name, tuple(keywords)) for name, keywords in value)
    if type_name.startswith("tuple"):
        return tuple(value)
    return value


def _parse_policy(cls: type, data: dict[str, Any] | None, section: str) -> Any:
    """Build a policy dataclass from a YAML section, defaulting absent keys."""
    if not data:
        return cls()
    fields = {f.name: f for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - set(fields))
    if unknown:
        raise ValueError(f"Unknown keys in '{section}' section: {unknown}")
    kwargs = {
        name: _coerce(fields[name].type, value)
        for name, value in data.items()
    }
    return cls(**kwargs)


def parse_themes(data: dict[str, list[str]]) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Parse an ordered ``theme: [keywords]`` mapping, keeping YAML order."""
    return tuple((name, tuple(keywords)) for name, keywords in data.items())


def parse_sentiment(data: dict[str, Any] | None) -> SentimentPolicy:
    """Parse the sentiment section; themes are authored as a mapping."""
    if not data:
        return SentimentPolicy()
    data = dict(data)
    themes = data.pop("themes", None)
    policy = _parse_policy(SentimentPolicy, data, "sentiment")
    if themes is not None:
        policy = dataclasses.replace(policy, themes=parse_themes(themes))
    return policy


def parse_config(data: dict[str, Any]) -> HRPolicyConfig:
    """
    Parse a full ``HRPolicyConfig`` from a root.yaml dict.

    Postconditions:
        - ``checksum`` is the SHA-256 of the canonical source dict.
    Raises:
        KeyError: if ``config_id`` or ``scope`` is missing.
        ValueError: if a section carries unknown keys or invalid values.
    """
    return HRPolicyConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        scope=parse_scope(data["scope"]),
        payroll=_parse_policy(PayrollPolicy, data.get("payroll"), "payroll"),
        anomaly=_parse_policy(AnomalyPolicy, data.get("anomaly"), "anomaly"),
        trend=_parse_policy(TrendPolicy, data.get("trend"), "trend"),
        sentiment=parse_sentiment(data.get("sentiment")),
        insight=_parse_policy(InsightPolicy, data.get("insight"), "insight"),
        attendance=_parse_policy(AttendancePolicy, data.get("attendance"), "attendance"),
        seeding=_parse_policy(SeedingPolicy, data.get("seeding"), "seeding"),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
