"""Database query functions for readings and alert history."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import cast

from plantmon.lib.alerts import Alert
from plantmon.lib.config import AlertType
from plantmon.lib.db.connection import get_db, load_template
from plantmon.lib.db.types import AlertRow, ReadingRow
from plantmon.lib.reading import Reading
from plantmon.lib.utils import to_db_timestamp


def _reading_params(reading: Reading) -> dict[str, object]:
    return {
        "soil": reading.soil,
        "light": reading.light,
        "temp": reading.temp,
        "humidity": reading.humidity,
        "water": reading.water,
        "timestamp": to_db_timestamp(reading.timestamp),
    }


async def get_latest_reading() -> Reading | None:
    """Return the most recent reading, or None if nothing was recorded."""
    async with get_db() as db:
        row = await db.fetchone(load_template("readings_latest.sql"))
    if row is None:
        return None
    return Reading.from_row(cast(ReadingRow, row))


async def get_readings_since(since: datetime) -> list[Reading]:
    """Return readings at or after ``since``, oldest first."""
    async with get_db() as db:
        rows = await db.fetchall(
            load_template("readings_since.sql"), (to_db_timestamp(since),)
        )
    return [Reading.from_row(cast(ReadingRow, row)) for row in rows]


async def insert_reading(reading: Reading) -> int:
    """Store a reading and return its id."""
    async with get_db() as db:
        return await db.insert(
            load_template("insert_reading.sql"), _reading_params(reading)
        )


async def insert_readings(readings: Sequence[Reading]) -> None:
    """Store many readings in one transaction."""
    async with get_db() as db, db.transaction():
        await db.executemany(
            load_template("insert_reading.sql"),
            [_reading_params(r) for r in readings],
        )


async def record_alert(
    alert: Alert, reading_id: int | None, triggered_at: datetime
) -> int:
    """Store a triggered alert so later runs see it in the cooldown window."""
    async with get_db() as db:
        return await db.insert(
            load_template("insert_alert.sql"),
            {
                "type": str(alert.type),
                "severity": str(alert.severity),
                "message": alert.message,
                "value": alert.value,
                "threshold": alert.threshold,
                "reading_id": reading_id,
                "triggered_at": to_db_timestamp(triggered_at),
            },
        )


async def alert_triggered_since(alert_type: AlertType, since: datetime) -> bool:
    """Return True if an alert of this type fired at or after ``since``.

    This is the history lookup used by the cooldown filter.
    """
    async with get_db() as db:
        row = await db.fetchone(
            load_template("alert_triggered_since.sql"),
            (str(alert_type), to_db_timestamp(since)),
        )
    return row is not None


async def get_alerts_since(since: datetime) -> list[AlertRow]:
    """Return alerts triggered at or after ``since``, oldest first."""
    async with get_db() as db:
        rows = await db.fetchall(
            load_template("alerts_since.sql"),
            (to_db_timestamp(since),),
        )
    return cast(list[AlertRow], rows)
