"""Shared pytest fixtures for the test suite."""

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import pytest

from plantmon.lib.config import AlertType, Settings
from plantmon.lib.config.testing import set_settings
from plantmon.lib.db import close_db
from plantmon.lib.reading import Reading

_SQL_DIR = Path(__file__).parent.parent / "plantmon" / "lib" / "sql"


class FakeAlertHistory:
    """In-memory alert history implementing the cooldown lookup."""

    def __init__(self) -> None:
        self.fired: dict[AlertType, list[datetime]] = {}
        self.lookups: list[tuple[AlertType, datetime]] = []

    def record(self, alert_type: AlertType, triggered_at: datetime) -> None:
        self.fired.setdefault(alert_type, []).append(triggered_at)

    def recently_triggered(self, alert_type: AlertType, since: datetime) -> bool:
        self.lookups.append((alert_type, since))
        return any(t >= since for t in self.fired.get(alert_type, []))


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the plantmon namespace."""
    caplog.set_level(logging.INFO, logger="plantmon")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


@pytest.fixture(autouse=True)
def test_db(tmp_path, monkeypatch):
    """Use a temporary SQLite database for tests.

    Creates a fresh database with the full schema for each test. Notification
    and threshold env vars are cleared so a developer's .env can't leak in.
    """
    for var in (
        "ENABLE_NOTIFICATION_SERVICE",
        "NOTIFICATION_BACKENDS",
        "SLACK_WEBHOOK_URL",
        "EMAIL_WEBHOOK_URL",
    ):
        monkeypatch.delenv(var, raising=False)

    db_file = tmp_path / "test.sqlite3"
    set_settings(Settings(db_path=str(db_file), _env_file=None))

    conn = sqlite3.connect(str(db_file))
    for name in (
        "init_readings_table.sql",
        "idx_readings.sql",
        "init_alerts_table.sql",
        "idx_alerts.sql",
    ):
        conn.executescript((_SQL_DIR / name).read_text())
    conn.close()

    yield db_file


@pytest.fixture
async def db():
    """Close the shared connection if the test opened one with init_db()."""
    yield
    await close_db()


@pytest.fixture
def frozen_time():
    """Return a fixed datetime for deterministic tests."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_reading(frozen_time):
    """Factory for readings with healthy defaults."""

    def _make(
        soil=2200.0,
        light=900.0,
        temp=24.0,
        humidity=60.0,
        water=None,
        timestamp=None,
        id=None,
    ) -> Reading:
        return Reading(
            soil=soil,
            light=light,
            temp=temp,
            humidity=humidity,
            water=water,
            timestamp=timestamp or frozen_time,
            id=id,
        )

    return _make


@pytest.fixture
def sample_reading(make_reading):
    """A reading with every metric inside its bounds."""
    return make_reading()


@pytest.fixture
def alert_history():
    return FakeAlertHistory()
