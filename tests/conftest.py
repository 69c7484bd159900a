from datetime import datetime, timezone

import pytest

from cadence.application.scheduler import Sm2Scheduler
from cadence.application.service import SrsService
from cadence.infrastructure.adapters.memory_store import InMemoryCardStore

T0 = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def scheduler():
    return Sm2Scheduler()


@pytest.fixture
def store():
    return InMemoryCardStore()


@pytest.fixture
def service(store, now):
    """Service over an in-memory store whose clock is frozen at T0."""
    return SrsService(store=store, streak_store=store, clock=lambda: now)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and card store
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "CADENCE_STORE_PATH",
        "CADENCE_MIN_EASE",
        "CADENCE_MAX_INTERVAL_DAYS",
        "CADENCE_AUTO_INITIALIZE",
        "CADENCE_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
