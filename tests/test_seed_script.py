"""End-to-end run of scripts/seed_demo_data.py against an in-memory database."""

import importlib.util
import logging
from pathlib import Path

import pytest

from hr_kernel.logging_config import configure_logging, reset_logging

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "seed_demo_data.py"


@pytest.fixture(scope="module")
def seed_script():
    spec = importlib.util.spec_from_file_location("seed_demo_data", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Configure logging up front so main() does not attach a stderr handler."""
    reset_logging()
    configure_logging(handler=logging.NullHandler())
    yield
    reset_logging()


class TestSeedDemoData:

    def test_parser_defaults(self, seed_script):
        args = seed_script.build_parser().parse_args([])

        assert args.db_url == seed_script.DB_URL
        assert args.organization == "default"
        assert args.seed is None
        assert not args.insights
        assert not args.anomalies

    @pytest.mark.slow
    def test_full_run(self, seed_script, capsys, captured_logs):
        exit_code = seed_script.main([
            "--db-url", "sqlite://",
            "--seed", "1",
            "--employees", "2",
            "--insights",
            "--anomalies",
        ])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Employees on file: 2" in out
        assert "Payroll:     2 seeded, 0 errors" in out
        assert "Performance: 2 seeded, 0 errors" in out
        assert "Insights:" in out
        assert "Anomalies:" in out

        logs = captured_logs()
        assert any(r["message"] == "HR_CONFIG_TRACE" for r in logs)
        completed = [r for r in logs if r["message"] == "seeding_completed"]
        assert {r["job_id"] for r in completed} == {"seed_demo_data"}

    def test_skip_flags(self, seed_script, capsys):
        exit_code = seed_script.main([
            "--db-url", "sqlite://",
            "--seed", "2",
            "--employees", "1",
            "--skip-payroll",
            "--skip-performance",
        ])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Employees on file: 1" in out
        assert "Payroll:" not in out
        assert "Performance:" not in out
