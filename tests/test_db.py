"""Tests for reading storage and alert history queries."""

from datetime import datetime, timedelta, timezone

import pytest

from plantmon.lib.alerts import Alert
from plantmon.lib.config import AlertType, Settings, Severity
from plantmon.lib.config.testing import set_settings
from plantmon.lib.db import (
    Database,
    alert_triggered_since,
    get_alerts_since,
    get_db,
    get_latest_reading,
    get_readings_since,
    init_db,
    insert_reading,
    insert_readings,
    record_alert,
)
from plantmon.lib.exceptions import DatabaseNotConnectedError


def make_alert(alert_type=AlertType.SOIL_DRY):
    return Alert(
        type=alert_type,
        severity=Severity.WARNING,
        message="Soil getting dry",
        value=1700,
        threshold=1800,
    )


@pytest.mark.usefixtures("db")
class TestReadings:
    """Tests for reading storage."""

    async def test_latest_reading_empty(self):
        assert await get_latest_reading() is None

    async def test_insert_and_fetch_latest(self, make_reading, frozen_time):
        await insert_reading(
            make_reading(timestamp=frozen_time - timedelta(minutes=5))
        )
        reading_id = await insert_reading(
            make_reading(soil=1750, water=42.0, timestamp=frozen_time)
        )

        latest = await get_latest_reading()

        assert latest is not None
        assert latest.id == reading_id
        assert latest.soil == 1750
        assert latest.water == 42.0
        assert latest.timestamp == frozen_time

    async def test_missing_light_reads_as_zero(self, frozen_time):
        async with get_db() as db:
            await db.execute(
                "INSERT INTO readings (soil, light, temp, humidity, timestamp) "
                "VALUES (?, NULL, ?, ?, ?)",
                (2000, 22, 55, "2024-06-15 12:00:00"),
            )

        latest = await get_latest_reading()

        assert latest is not None
        assert latest.light == 0.0
        assert latest.water is None

    async def test_readings_since_is_ordered_and_bounded(
        self, make_reading, frozen_time
    ):
        await insert_readings(
            [
                make_reading(
                    soil=2000 + i, timestamp=frozen_time - timedelta(hours=h)
                )
                for i, h in enumerate([30, 2, 24, 1])
            ]
        )

        readings = await get_readings_since(frozen_time - timedelta(hours=24))

        assert [r.soil for r in readings] == [2002, 2001, 2003]
        assert readings[0].timestamp == frozen_time - timedelta(hours=24)

    async def test_aware_timestamps_are_stored_as_utc(self, make_reading):
        local = datetime(
            2024, 6, 15, 17, 30, tzinfo=timezone(timedelta(hours=5, minutes=30))
        )
        await insert_reading(make_reading(timestamp=local))

        latest = await get_latest_reading()

        assert latest.timestamp == local
        assert latest.timestamp.utcoffset() == timedelta(0)


@pytest.mark.usefixtures("db")
class TestAlertHistory:
    """Tests for alert history lookups."""

    async def test_triggered_since(self, frozen_time):
        await record_alert(
            make_alert(), None, frozen_time - timedelta(minutes=10)
        )

        assert await alert_triggered_since(
            AlertType.SOIL_DRY, frozen_time - timedelta(minutes=30)
        )
        assert not await alert_triggered_since(
            AlertType.SOIL_DRY, frozen_time - timedelta(minutes=5)
        )
        assert not await alert_triggered_since(
            AlertType.TEMP_HIGH, frozen_time - timedelta(minutes=30)
        )

    async def test_window_start_is_inclusive(self, frozen_time):
        since = frozen_time - timedelta(minutes=30)
        await record_alert(make_alert(), None, since)

        assert await alert_triggered_since(AlertType.SOIL_DRY, since)

    async def test_record_alert_stores_fields(
        self, make_reading, frozen_time
    ):
        reading_id = await insert_reading(make_reading(soil=1700))
        await record_alert(make_alert(), reading_id, frozen_time)

        rows = await get_alerts_since(frozen_time)

        assert len(rows) == 1
        assert rows[0]["type"] == "soil_dry"
        assert rows[0]["severity"] == "warning"
        assert rows[0]["value"] == 1700
        assert rows[0]["threshold"] == 1800
        assert rows[0]["reading_id"] == reading_id
        assert rows[0]["triggered_at"] == "2024-06-15 12:00:00"


class TestDatabase:
    """Tests for the connection wrapper."""

    async def test_requires_connection(self, test_db):
        database = Database(str(test_db))

        with pytest.raises(DatabaseNotConnectedError):
            await database.fetchone("SELECT 1")

    async def test_transaction_rolls_back_on_error(self, test_db):
        async with Database(str(test_db)) as database:
            with pytest.raises(RuntimeError):
                async with database.transaction():
                    await database.execute(
                        "INSERT INTO readings (soil, temp, humidity, timestamp) "
                        "VALUES (1, 2, 3, '2024-06-15 12:00:00')"
                    )
                    raise RuntimeError("abort")

            row = await database.fetchone("SELECT COUNT(*) AS n FROM readings")

        assert row == {"n": 0}

    async def test_init_db_creates_schema(self, db, tmp_path):
        fresh = tmp_path / "fresh.sqlite3"
        set_settings(Settings(db_path=str(fresh), _env_file=None))

        await init_db()
        async with get_db() as database:
            tables = await database.fetchall(
                "SELECT name FROM sqlite_master WHERE type = 'table' "
                "ORDER BY name"
            )

        assert {"alerts", "readings"} <= {t["name"] for t in tables}
