"""
Seeding Module (``hr_modules.seeding``).

Synthetic demo data for development databases.  ``FixtureGenerator`` is
pure and seeded; ``SeedingService`` writes its output employee by
employee inside savepoints.
"""

from hr_modules.seeding.generators import DemoEmployee, FixtureGenerator
from hr_modules.seeding.models import SeedResult
from hr_modules.seeding.service import SeedingService

__all__ = ["DemoEmployee", "FixtureGenerator", "SeedResult", "SeedingService"]
