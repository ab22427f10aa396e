#!/usr/bin/env python3
"""
Seed a database with demo HR data.

Creates the tables if needed, inserts the demo employees, then seeds
salary structures, monthly payrolls, daily attendance, performance
metrics and quarterly feedback.  Optionally generates performance
insights and runs the anomaly scans over the seeded data.

Usage:
    python3 scripts/seed_demo_data.py
    python3 scripts/seed_demo_data.py --db-url sqlite:///hr_demo.db --seed 42
    python3 scripts/seed_demo_data.py --insights --anomalies
"""

import argparse
import logging
import random
import sys
from datetime import date
from pathlib import Path
from uuid import uuid4

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from hr_config import get_active_config
from hr_kernel.db.engine import create_tables, get_session, init_engine_from_url, reset_engine
from hr_kernel.domain.clock import SystemClock
from hr_kernel.logging_config import LogContext, configure_logging
from hr_modules.anomaly import AnomalyDetectionService, DetectionType
from hr_modules.performance import PerformanceInsightService
from hr_modules.seeding import FixtureGenerator, SeedingService

DB_URL = "sqlite:///hr_demo.db"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed a database with demo HR data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-url", type=str, default=DB_URL,
        help=f"Database URL (default: {DB_URL})",
    )
    parser.add_argument(
        "--organization", type=str, default="default",
        help="Organization whose configuration set applies",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="RNG seed (default: the configuration's seeding.rng_seed)",
    )
    parser.add_argument(
        "--employees", type=int, default=None,
        help="Number of demo employees to create (default: all)",
    )
    parser.add_argument("--skip-payroll", action="store_true", help="Do not seed payrolls")
    parser.add_argument(
        "--skip-performance", action="store_true",
        help="Do not seed metrics, feedback or attendance",
    )
    parser.add_argument(
        "--insights", action="store_true",
        help="Generate performance insights after seeding",
    )
    parser.add_argument(
        "--anomalies", action="store_true",
        help="Run payroll and attendance anomaly scans after seeding",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    clock = SystemClock()
    config = get_active_config(args.organization, clock.today())
    seed = args.seed if args.seed is not None else config.seeding.rng_seed
    generator = FixtureGenerator(
        random.Random(seed),
        verification_method=config.attendance.verification_method,
    )
    actor_id = uuid4()

    init_engine_from_url(args.db_url)
    create_tables()
    session = get_session()
    errors = 0
    try:
        with LogContext.bind(actor_id=str(actor_id), job_id="seed_demo_data"):
            seeder = SeedingService(
                session,
                actor_id=actor_id,
                clock=clock,
                generator=generator,
                payroll_policy=config.payroll,
                attendance_policy=config.attendance,
                seeding_policy=config.seeding,
            )
            employees = seeder.ensure_employees(generator.demo_employees(args.employees))
            print(f"Employees on file: {len(employees)}")

            if not args.skip_payroll:
                result = seeder.seed_payroll_data()
                errors += result.errors
                print(f"Payroll:     {result.success} seeded, {result.errors} errors")
            if not args.skip_performance:
                result = seeder.seed_performance_data()
                errors += result.errors
                print(f"Performance: {result.success} seeded, {result.errors} errors")

            if args.insights:
                insights = PerformanceInsightService(
                    session,
                    clock=clock,
                    trend_policy=config.trend,
                    sentiment_policy=config.sentiment,
                    insight_policy=config.insight,
                )
                total = 0
                for employee in employees:
                    run = insights.generate_insights(employee.id, actor_id=actor_id)
                    total += run.count
                print(f"Insights:    {total} generated")

            if args.anomalies:
                report = AnomalyDetectionService(
                    session, clock=clock, policy=config.anomaly
                ).detect(DetectionType.ALL)
                print(f"Anomalies:   {report.count} found")
                for anomaly in report.anomalies:
                    print(f"  [{anomaly.severity.value}] {anomaly.subject_name}: {anomaly.description}")
    finally:
        session.close()
        reset_engine()

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
