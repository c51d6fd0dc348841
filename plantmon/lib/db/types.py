"""Type definitions for database operations."""

from typing import Any, TypeAlias, TypedDict

SQLParams: TypeAlias = tuple[Any, ...] | dict[str, Any]
"""SQL parameter types: positional tuple or named dict for query binding."""


class ReadingRow(TypedDict):
    """Sensor reading as stored in the readings table."""

    id: int
    soil: float
    light: float | None
    temp: float
    humidity: float
    water: float | None
    timestamp: str


class AlertRow(TypedDict):
    """Triggered alert as stored in the alerts table."""

    id: int
    type: str
    severity: str
    message: str
    value: float
    threshold: float
    reading_id: int | None
    triggered_at: str
