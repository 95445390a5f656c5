"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REFERRAL_BASE_URL", "https://www.access-sellr.com/ref")
os.environ.setdefault("CURRENCY_SYMBOL", "₦")
os.environ.setdefault("DISPLAY_TIMEZONE", "Africa/Lagos")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import random  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402


class RecordingDispatcher:
    """Notification collaborator that keeps every event it receives."""

    def __init__(self) -> None:
        self.events = []

    async def dispatch(self, event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list:
        return [e for e in self.events if e.event_type == event_type]


class FailingDispatcher:
    """Notification collaborator that is always down."""

    def __init__(self) -> None:
        self.calls = 0

    async def dispatch(self, event) -> None:
        self.calls += 1
        raise ConnectionError("mail server unavailable")


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def seeded_rng():
    """Deterministic random source for referral code generation."""
    return random.Random(20261019)


@pytest.fixture
def recording_dispatcher():
    """Dispatcher capturing events."""
    return RecordingDispatcher()


@pytest.fixture
def failing_dispatcher():
    """Dispatcher raising on every event."""
    return FailingDispatcher()
