"""
Pure domain layer.

Holds the time abstraction shared by services.  NO dependencies on ORM,
database or I/O.
"""

from hr_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
]
