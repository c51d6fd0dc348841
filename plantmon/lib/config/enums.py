"""Enumerations for the plant monitor."""

from enum import StrEnum


class NotificationBackend(StrEnum):
    SLACK = "slack"
    WEBHOOK = "webhook"


class Severity(StrEnum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class AlertType(StrEnum):
    """Alert keys: metric plus the direction the bound was crossed."""

    SOIL_DRY = "soil_dry"
    SOIL_WET = "soil_wet"
    TEMP_HIGH = "temp_high"
    TEMP_LOW = "temp_low"
    LIGHT_LOW = "light_low"
    HUMIDITY_HIGH = "humidity_high"
    HUMIDITY_LOW = "humidity_low"


class Trend(StrEnum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"
