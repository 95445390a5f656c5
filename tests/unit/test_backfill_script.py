"""
Unit tests for the referral code backfill entry point.
"""

import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest


SCRIPT = Path(__file__).parents[2] / "scripts" / "backfill_referral_codes.py"


@pytest.fixture
def script(monkeypatch):
    """Load the script as a module with logging setup disabled."""
    spec = importlib.util.spec_from_file_location("backfill_referral_codes", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    monkeypatch.setattr(module, "setup_logging", MagicMock())
    return module


class TestBackfillScript:
    """Test exit codes and summary line."""

    def test_success_prints_summary(self, script, monkeypatch, capsys):
        """Test summary line and exit code 0."""
        monkeypatch.setattr(
            script, "backfill_referral_codes", AsyncMock(return_value=3)
        )

        assert script.main() == 0
        assert capsys.readouterr().out.strip() == (
            "Backfill complete. Created 3 referral codes."
        )

    def test_failure_exit_code(self, script, monkeypatch, capsys):
        """Test unrecoverable failure exits with 1."""
        monkeypatch.setattr(
            script,
            "backfill_referral_codes",
            AsyncMock(side_effect=ConnectionRefusedError("database down")),
        )

        assert script.main() == 1
        assert "Backfill complete" not in capsys.readouterr().out
