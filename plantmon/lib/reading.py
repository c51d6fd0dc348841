"""Domain model for a sensor reading."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from plantmon.lib.utils import parse_db_timestamp


@dataclass(frozen=True, slots=True)
class Reading:
    """One timestamped snapshot of sensor values.

    ``water`` is the reservoir level in percent; None (or 0) means no water
    sensor is attached.
    """

    soil: float
    light: float
    temp: float
    humidity: float
    timestamp: datetime
    water: float | None = None
    id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Reading":
        """Build a reading from a database row."""
        light = row.get("light")
        return cls(
            soil=row["soil"],
            light=light if light is not None else 0.0,
            temp=row["temp"],
            humidity=row["humidity"],
            timestamp=parse_db_timestamp(row["timestamp"]),
            water=row.get("water"),
            id=row.get("id"),
        )
