from datetime import datetime

import pytest

from memora.domain.constants import DAY_MS
from memora.infrastructure.json_store import JsonFileStore


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, start: int):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def advance_days(self, days: int) -> None:
        self.now += days * DAY_MS


def local_ms(*args) -> int:
    """Epoch ms of a naive local datetime."""
    return int(datetime(*args).timestamp() * 1000)


@pytest.fixture
def now():
    """A fixed local noon, far from midnight boundaries."""
    return local_ms(2026, 3, 10, 12, 0)


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def store(tmp_path, clock):
    return JsonFileStore(tmp_path / "data.json", clock=clock)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in ("MEMORA_DATA_FILE", "MEMORA_LOG_DIR", "MEMORA_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def at():
    """Build epoch ms from local date parts: at(2026, 3, 10, 9)."""
    return local_ms
