"""Seeding outcome value objects."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SeedResult:
    """Per-employee tally of one seeding pass."""
    success: int = 0
    errors: int = 0

    def __add__(self, other: SeedResult) -> SeedResult:
        return SeedResult(
            success=self.success + other.success,
            errors=self.errors + other.errors,
        )

    @property
    def total(self) -> int:
        return self.success + self.errors
